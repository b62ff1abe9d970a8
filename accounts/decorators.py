"""
Auth gate for views that change data.
"""

import functools

from django.contrib import messages
from django.contrib.auth.views import redirect_to_login

LOGIN_REQUIRED_MESSAGE = 'Oops! You must be logged in!'


def login_required(view_func):
    """
    Let authenticated users through; flash an error and send everyone else
    to the login page, returning them here afterwards.
    """

    @functools.wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.user.is_authenticated:
            return view_func(request, *args, **kwargs)
        messages.error(request, LOGIN_REQUIRED_MESSAGE)
        return redirect_to_login(request.get_full_path())

    return wrapper
