"""Account domain events."""

from protean.fields import DateTime, Identifier, String

from teffmarket.domain import teffmarket


@teffmarket.event(part_of="Account")
class AccountRegistered:
    """A customer, merchant or administrator joined the marketplace."""

    __version__ = 1

    account_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    role = String(required=True)


@teffmarket.event(part_of="Account")
class AccountDeactivated:
    """An account was soft-deleted and can no longer act on the marketplace."""

    __version__ = 1

    account_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
