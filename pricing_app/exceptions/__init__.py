"""Errors raised by the quote services and rendered as JSON by the app."""


class PricingError(Exception):
    """
    Base for quote and catalog errors.

    ``status_code`` is the HTTP status the app factory answers with and
    ``payload`` carries extra fields for the JSON body (e.g. the offending
    product id).
    """
    def __init__(self, message="Quote could not be priced", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class ValidationError(PricingError):
    """A quantity, rate, margin, price or export format was rejected; the quote is unchanged."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)


class NotFoundError(PricingError):
    """Unknown product, discount tier or quote line."""
    def __init__(self, message="Not in catalog", payload=None):
        super().__init__(message, 404, payload)


class CatalogUnavailableError(PricingError):
    """The catalog database cannot be reached."""
    def __init__(self, message="Catalog unavailable", payload=None):
        super().__init__(message, 503, payload)
