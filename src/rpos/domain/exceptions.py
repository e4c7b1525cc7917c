"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer (or any other adapter) can catch them uniformly.  Each
class carries the HTTP-style ``status_code`` an adapter should report.
"""

from __future__ import annotations

from decimal import Decimal


class DomainException(Exception):
    """Base class for all domain errors."""

    status_code = 500

    @property
    def is_server_fault(self) -> bool:
        """True when the error needs operator attention, not a user retry."""
        return self.status_code >= 500


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    status_code = 400


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    status_code = 404


class InvalidProductError(ValidationError):
    """A product exists but cannot be sold (e.g. it is inactive)."""


class InvalidTransitionError(DomainException):
    """The order's current status does not permit the requested operation."""

    status_code = 409


class InsufficientStockError(DomainException):
    """A consumption would drive a product or ingredient below zero."""

    status_code = 409

    def __init__(
        self,
        item_kind: str,
        item_id: int,
        item_name: str,
        available: Decimal | int,
        requested: Decimal | int,
    ) -> None:
        self.item_kind = item_kind
        self.item_id = item_id
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item_kind} {item_name} "
            f"(need {requested}, have {available} available)"
        )


class CorruptedRecipeDataError(DomainException):
    """A recipe line references an ingredient that does not exist."""

    status_code = 500


class InternalError(DomainException):
    """An unexpected failure inside the core."""

    status_code = 500
