"""Account aggregate: customers, merchants and administrators.

Passwords and sessions live with the external authentication service; this
registry only keeps what the marketplace needs to route and authorize work:
who a caller is, which role they hold and whether they are still active.
Merchant names are snapshotted onto orders from here.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String

from teffmarket.account.events import AccountDeactivated, AccountRegistered
from teffmarket.domain import teffmarket
from teffmarket.shared.errors import InvalidStateError


class Role(Enum):
    CUSTOMER = "user"
    MERCHANT = "merchant"
    ADMIN = "admin"


@teffmarket.aggregate
class Account:
    name = String(required=True, min_length=2, max_length=50)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    active = Boolean(default=True)
    created_at = DateTime()

    @classmethod
    def register(cls, name, email, role=Role.CUSTOMER.value, phone=None):
        account = cls(
            name=name,
            email=email.strip().lower(),
            phone=phone,
            role=role,
            active=True,
            created_at=datetime.now(UTC),
        )
        account.raise_(
            AccountRegistered(
                account_id=str(account.id),
                name=account.name,
                email=account.email,
                role=account.role,
            )
        )
        return account

    @property
    def is_merchant(self) -> bool:
        return self.active and self.role == Role.MERCHANT.value

    @property
    def is_admin(self) -> bool:
        return self.active and self.role == Role.ADMIN.value

    def deactivate(self) -> None:
        if not self.active:
            raise InvalidStateError("Account is already deactivated")

        self.active = False
        self.raise_(AccountDeactivated(account_id=str(self.id), deactivated_at=datetime.now(UTC)))
