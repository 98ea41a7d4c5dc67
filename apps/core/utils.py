"""
Helper utilities for sub-account selection
"""
from apps.core.models import Account


def get_user_account(request):
    """
    Get the active sub-account for the current user:
    - Superuser: from session (selected sub-account)
    - Regular users: from user.account

    Returns:
        Account object or None
    """
    if not request.user.is_authenticated:
        return None

    if request.user.is_superuser:
        account_id = request.session.get('selected_account_id')
        if account_id:
            try:
                return Account.objects.get(pk=account_id)
            except Account.DoesNotExist:
                # Account deleted - clear session
                request.session.pop('selected_account_id', None)
                return None
        return request.user.account

    return request.user.account


def set_selected_account(request, account_id):
    """
    Store the selected sub-account in the session (Superuser only)

    Returns:
        True if successful, False otherwise
    """
    if not request.user.is_superuser:
        return False

    try:
        account = Account.objects.get(pk=account_id)
    except (Account.DoesNotExist, ValueError):
        return False

    request.session['selected_account_id'] = account.id
    return True
