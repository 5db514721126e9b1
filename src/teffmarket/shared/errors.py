"""Business-rule errors raised by aggregates and command handlers.

Field-level problems (missing contact details, quantities under the
0.1 kg floor) surface as protean's ``ValidationError``; the classes here
cover the rules that are not about a single field. The HTTP layer maps each
class to its status code through ``status_code``.
"""


class MarketplaceError(Exception):
    kind = "Error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    kind = "NotFound"
    status_code = 404


class ForbiddenError(MarketplaceError):
    kind = "Forbidden"
    status_code = 403


class OutOfStockError(MarketplaceError):
    kind = "OutOfStock"


class InvalidStateError(MarketplaceError):
    kind = "InvalidState"


class InvalidMerchantError(MarketplaceError):
    kind = "InvalidMerchant"
