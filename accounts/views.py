"""
Login and logout views with flash feedback.
"""

import logging

from django.contrib import messages
from django.contrib.auth import logout as auth_logout
from django.contrib.auth.views import LoginView
from django.shortcuts import redirect
from django.views.decorators.http import require_POST

logger = logging.getLogger(__name__)


class StoreLoginView(LoginView):
    template_name = 'accounts/login.html'
    redirect_authenticated_user = True
    extra_context = {'title': 'Login'}

    def form_valid(self, form):
        response = super().form_valid(form)
        messages.success(self.request, 'You are logged in')
        logger.info(f"User {form.get_user().pk} logged in")
        return response

    def form_invalid(self, form):
        messages.error(self.request, 'Failed login')
        return super().form_invalid(form)


login = StoreLoginView.as_view()


@require_POST
def logout(request):
    auth_logout(request)
    messages.success(request, 'Success! You are logged out')
    return redirect('/')
