"""
Domain error taxonomy shared by every app.

Services raise these; ``core.exceptions.domain_exception_handler`` turns them
into HTTP responses using ``status_code``.
"""


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFound(DomainError):
    """A referenced sku, customer, order, invoice, warehouse ... does not exist."""

    status_code = 404


class InvalidState(DomainError):
    """The action is not allowed from the document's current lifecycle state."""


class InsufficientStock(DomainError):
    """Requested quantity exceeds the stock on hand."""


class InvalidArgument(DomainError):
    """Malformed or cross-referentially invalid input."""
