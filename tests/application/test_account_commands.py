"""Application tests for account registration and deactivation."""

import pytest
from factories import register_account
from protean import current_domain
from protean.exceptions import ValidationError
from teffmarket.account.account import Account
from teffmarket.account.registration import DeactivateAccount
from teffmarket.shared.errors import InvalidStateError


class TestRegisterAccount:
    def test_register_customer(self):
        account_id = register_account("Hana Bekele", "Hana@Example.com")

        account = current_domain.repository_for(Account).get(account_id)
        assert account.role == "user"
        assert account.email == "hana@example.com"

    def test_email_must_be_unique(self):
        register_account("Hana Bekele", "hana@example.com")
        with pytest.raises(ValidationError) as exc:
            register_account("Hana B", "HANA@example.com")
        assert "An account with this email already exists" in str(exc.value)


class TestDeactivateAccount:
    def test_deactivated_merchant_drops_from_merchant_list(self, merchant_x, merchant_y):
        current_domain.process(DeactivateAccount(account_id=merchant_x), asynchronous=False)

        merchants = current_domain.repository_for(Account).active_merchants()
        assert [str(m.id) for m in merchants] == [merchant_y]

    def test_deactivating_twice(self, merchant_x):
        current_domain.process(DeactivateAccount(account_id=merchant_x), asynchronous=False)
        with pytest.raises(InvalidStateError):
            current_domain.process(DeactivateAccount(account_id=merchant_x), asynchronous=False)

    def test_deactivated_account_is_still_found_by_id(self, merchant_x):
        current_domain.process(DeactivateAccount(account_id=merchant_x), asynchronous=False)

        repo = current_domain.repository_for(Account)
        assert repo.find_active(merchant_x) is None
        assert repo.find_any(merchant_x).name == "Abebe Grains"
        assert repo.find_any("no-such-account") is None
