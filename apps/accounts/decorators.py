# Decorators in this file:
# 1. admin_required - Only admins can access
# 2. account_required - A sub-account must be active for the request
# ==============================================================================

from functools import wraps
from django.shortcuts import redirect
from django.contrib import messages
from django.http import JsonResponse
from django.utils.translation import gettext_lazy as _


def _is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


# ROLE-BASED DECORATORS
def admin_required(view_func):
    """
    Decorator: Only admins can access this view

    Checks:
    1. User is authenticated (logged in)
    2. User role is 'admin' OR is superuser
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            messages.error(request, _('Please login to continue.'))
            return redirect('accounts:login')

        if request.user.is_admin():
            return view_func(request, *args, **kwargs)

        if _is_ajax(request):
            return JsonResponse({
                'success': False,
                'error': 'Admin access required'
            }, status=403)

        messages.error(
            request,
            _('You do not have permission to access this page. Admin access required.')
        )
        return redirect('core:dashboard')

    return wrapper



# ACCOUNT-BASED DECORATORS
def account_required(view_func):
    """
    Decorator: the request must run inside a sub-account

    Resolves the active sub-account (the user's own account, or the one a
    superuser picked in the account selector) and stores it on
    ``request.account`` for the view.

    Example flow:
    Superuser without a selection → redirected to the account selector
    Agent without an account → error message + redirect to settings
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        # Imported here, core depends on accounts for the user model
        from apps.core.utils import get_user_account

        if not request.user.is_authenticated:
            messages.error(request, _('Please login to continue.'))
            return redirect('accounts:login')

        account = get_user_account(request)
        if account is not None:
            request.account = account
            return view_func(request, *args, **kwargs)

        if _is_ajax(request):
            return JsonResponse({
                'success': False,
                'error': 'No sub-account selected'
            }, status=403)

        if request.user.is_superuser:
            messages.info(request, _('Select a sub-account to continue.'))
            return redirect('core:account_selector')

        messages.error(
            request,
            _('You must be assigned to a sub-account to access this page.')
        )
        return redirect('accounts:settings')

    return wrapper
