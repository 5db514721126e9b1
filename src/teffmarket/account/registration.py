"""Account registration and deactivation: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from teffmarket.account.account import Account, Role
from teffmarket.domain import teffmarket


@teffmarket.command(part_of="Account")
class RegisterAccount:
    name = String(required=True, min_length=2, max_length=50)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    role = String(choices=Role, default=Role.CUSTOMER.value)


@teffmarket.command(part_of="Account")
class DeactivateAccount:
    account_id = Identifier(required=True)


@teffmarket.command_handler(part_of=Account)
class AccountRegistrationHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        repo = current_domain.repository_for(Account)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["An account with this email already exists"]})

        account = Account.register(
            name=command.name,
            email=command.email,
            role=command.role,
            phone=command.phone,
        )
        repo.add(account)
        return str(account.id)

    @handle(DeactivateAccount)
    def deactivate_account(self, command):
        repo = current_domain.repository_for(Account)
        account = repo.get(command.account_id)
        account.deactivate()
        repo.add(account)
