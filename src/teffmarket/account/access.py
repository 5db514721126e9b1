"""Caller checks shared by command handlers and the HTTP layer."""

from protean.utils.globals import current_domain

from teffmarket.account.account import Account
from teffmarket.shared.errors import ForbiddenError


def active_account(account_id) -> Account | None:
    if not account_id:
        return None
    return current_domain.repository_for(Account).find_active(str(account_id))


def require_admin(account_id) -> Account:
    account = active_account(account_id)
    if account is None or not account.is_admin:
        raise ForbiddenError("Admin access required")
    return account


def require_merchant(account_id) -> Account:
    account = active_account(account_id)
    if account is None or not account.is_merchant:
        raise ForbiddenError("Merchant access required")
    return account


def merchant_display_name(merchant_id) -> str:
    """Name to snapshot onto an order; deactivated merchants still show by name."""
    account = current_domain.repository_for(Account).find_any(str(merchant_id))
    return account.name if account is not None else "Unknown"
