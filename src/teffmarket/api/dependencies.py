"""Caller resolution for the HTTP layer.

Authentication happens upstream; the gateway forwards the authenticated
account id in the ``X-Account-Id`` header. Routes that need a caller depend
on one of the functions below, and the domain re-checks roles itself.
"""

from fastapi import Depends, Header, HTTPException

from teffmarket.account.access import active_account, require_admin, require_merchant
from teffmarket.account.account import Account


async def optional_caller(x_account_id: str | None = Header(default=None)) -> Account | None:
    """The caller's account, or None for guests. An unknown id is rejected."""
    if not x_account_id:
        return None
    account = active_account(x_account_id)
    if account is None:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")
    return account


async def current_caller(caller: Account | None = Depends(optional_caller)) -> Account:
    if caller is None:
        raise HTTPException(status_code=401, detail="Not authorized, no account")
    return caller


async def admin_caller(caller: Account = Depends(current_caller)) -> Account:
    return require_admin(caller.id)


async def merchant_caller(caller: Account = Depends(current_caller)) -> Account:
    return require_merchant(caller.id)
