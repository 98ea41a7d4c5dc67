from .utils import get_user_account


def current_account(request):
    """Expose the active sub-account to every template as ``current_account``."""
    account = getattr(request, 'account', None)
    if account is None and hasattr(request, 'user'):
        account = get_user_account(request)
    return {'current_account': account}
