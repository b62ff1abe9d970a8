"""
Store directory JSON API.

Provides:
- GET /api/v1/search?q=... - Typeahead search (name + slug)
- GET /api/v1/stores - Paginated store listing
- GET /api/v1/stores/top - Top rated stores
- GET /api/v1/store/{slug} - Store detail, reviews included by default
- POST /api/v1/stores - Create a store (JWT)
- PUT /api/v1/stores/{id} - Update an owned store (JWT)
- GET /api/v1/tags - Tag counts
"""

from datetime import datetime
from typing import List

from django.conf import settings
from ninja import Field, Query, Router, Schema
from ninja_jwt.authentication import JWTAuth

from stores import services
from stores.models import Store

router = Router()


class SearchResultSchema(Schema):
    name: str
    slug: str


class LocationSchema(Schema):
    type: str = "Point"
    coordinates: List[float]
    address: str


class ReviewSchema(Schema):
    id: int
    author: str
    text: str
    rating: int
    created: datetime

    @staticmethod
    def resolve_author(obj) -> str:
        return obj.author.get_username()


class StoreSchema(Schema):
    id: int
    name: str
    slug: str
    description: str
    tags: List[str]
    created: datetime
    location: LocationSchema
    photo: str
    author: int = Field(..., alias="author_id")


class StoreDetailSchema(StoreSchema):
    reviews: List[ReviewSchema] = []

    @staticmethod
    def resolve_reviews(obj: Store) -> list:
        # Only reviews joined by the read query; never a query per store
        if "reviews" not in getattr(obj, "_prefetched_objects_cache", {}):
            return []
        return list(obj.reviews.all())


class TopStoreSchema(StoreSchema):
    average_rating: float
    review_count: int


class StorePageSchema(Schema):
    results: List[StoreDetailSchema]
    page: int
    total_pages: int
    count: int


class TagCountSchema(Schema):
    tag: str
    count: int


class LocationInSchema(Schema):
    type: str | None = None  # Ignored, always stored as "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2)
    address: str


class StoreCreateSchema(Schema):
    name: str
    description: str = ""
    tags: List[str] = []
    location: LocationInSchema
    photo: str = ""


class StoreUpdateSchema(Schema):
    name: str | None = None
    description: str | None = None
    tags: List[str] | None = None
    location: LocationInSchema | None = None
    photo: str | None = None


@router.get("/search", response=List[SearchResultSchema], auth=None)
def search(request, q: str = Query("", description="Free-text search over name and description")):
    """Typeahead search; an empty query returns no results."""
    return services.search_stores(q)


@router.get("/stores", response=StorePageSchema, auth=None)
def list_stores(
    request,
    page: int = 1,
    per_page: int | None = Query(None, ge=1, le=settings.MAX_STORES_PER_PAGE),
    include_reviews: bool = False,
):
    result = services.get_stores(page=page, per_page=per_page, include_reviews=include_reviews)
    return {
        "results": result.object_list,
        "page": result.number,
        "total_pages": result.paginator.num_pages,
        "count": result.paginator.count,
    }


@router.get("/stores/top", response=List[TopStoreSchema], auth=None)
def top_stores(request):
    return services.get_top_stores()


@router.get("/store/{slug}", response=StoreDetailSchema, auth=None)
def get_store(request, slug: str, include_reviews: bool = True):
    return services.get_store_by_slug(slug, include_reviews=include_reviews)


@router.post("/stores", response={201: StoreDetailSchema}, auth=JWTAuth())
def create_store(request, payload: StoreCreateSchema):
    store = services.create_store(request.auth, payload.dict())
    return 201, store


@router.put("/stores/{store_id}", response=StoreDetailSchema, auth=JWTAuth())
def update_store(request, store_id: int, payload: StoreUpdateSchema):
    data = payload.dict(exclude_unset=True)
    return services.update_store(store_id, data, user=request.auth)


@router.get("/tags", response=List[TagCountSchema], auth=None)
def tags(request):
    return services.get_tags_list()
