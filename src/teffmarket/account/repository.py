"""Repository for the Account aggregate."""

from teffmarket.account.account import Account, Role
from teffmarket.domain import teffmarket
from teffmarket.shared.queries import fetch_all


@teffmarket.repository(part_of=Account)
class AccountRepository:
    def find_by_email(self, email: str) -> Account | None:
        matches = self._dao.query.filter(email=email.strip().lower()).all().items
        return matches[0] if matches else None

    def find_any(self, account_id: str) -> Account | None:
        """Return the account whether or not it has been deactivated."""
        matches = self._dao.query.filter(id=account_id).all().items
        return matches[0] if matches else None

    def find_active(self, account_id: str) -> Account | None:
        """Return the account if it exists and has not been deactivated."""
        account = self.find_any(account_id)
        return account if account is not None and account.active else None

    def active_merchants(self) -> list[Account]:
        return fetch_all(self._dao.query.filter(role=Role.MERCHANT.value, active=True).order_by("name"))
