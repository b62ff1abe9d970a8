from django.contrib import admin
from config import admin as admin_branding  # noqa: F401 (sets admin site titles)
from django.urls import path, include
from ninja import NinjaAPI
from api.errors import register_exception_handlers
from api.views import router as api_router
from api.health import router as health_router
from rest_framework_simplejwt.views import (TokenObtainPairView, TokenRefreshView)


# Instantiate the API without a global authentication requirement.
# Read and search routes are public; create/update routes declare JWTAuth.
api = NinjaAPI(title="Store Directory API", urls_namespace="api")
api.add_router("/v1/", api_router)
api.add_router("", health_router)
register_exception_handlers(api)


urlpatterns = [
    path("grappelli/", include("grappelli.urls")),
    path("admin/", admin.site.urls),
    path("api/v1/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/v1/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/", api.urls),
    path("", include("accounts.urls")),
    path("", include("reviews.urls")),
    path("", include("stores.urls")),
]
