"""
Exceptions raised by the billing services.

Blueprints translate them into JSON error responses; the message text is
what the client sees.
"""


class BillingError(RuntimeError):
    """Base class for billing failures."""


class ValidationError(BillingError):
    """Missing, empty or malformed input."""


class ProductNotFoundError(BillingError):
    pass


class InsufficientStockError(BillingError):
    pass


class BillNotFoundError(BillingError):
    pass
