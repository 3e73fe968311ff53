"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

``InventoryContractError`` and ``TransactionConflictError`` sit
outside that hierarchy: the first signals a bug in the caller, the second a
transient persistence condition that the application layer retries.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderNotFoundError(EntityNotFoundError):
    """The referenced order does not exist (or was removed)."""


class ProductNotFoundError(EntityNotFoundError):
    """The referenced product does not exist, is inactive or was deleted."""


class InsufficientStockError(DomainException):
    """Requested quantity exceeds what the inventory can give."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient inventory for {product_name} "
            f"(requested {requested}, available {available})"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InvalidTransitionError(DomainException):
    """The requested status is not a legal edge from the current status."""


class OrderNotEditableError(DomainException):
    """Items can not be edited once an order reached a terminal status."""


class OrderNotArchivableError(DomainException):
    """Only orders in a terminal status can be archived."""


class InventoryContractError(Exception):
    """A ledger primitive was called with a quantity it can never honour."""


class TransactionConflictError(Exception):
    """The persistence layer reported contention; the operation may be retried."""
