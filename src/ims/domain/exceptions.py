"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the application and CLI layers can catch them uniformly and turn them
into results or user-friendly messages.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BatchProblem:
    """One rejected entry of a bulk operation."""

    index: int
    product_id: str | None
    message: str

    def __str__(self) -> str:
        target = self.product_id if self.product_id else "<missing id>"
        return f"#{self.index} ({target}): {self.message}"


class DomainException(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str, problems: list[BatchProblem] | None = None) -> None:
        super().__init__(message)
        self.problems: list[BatchProblem] = list(problems or [])


class ValidationError(DomainException):
    """Input is malformed or out of range, or an invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class PersistenceError(DomainException):
    """The store was unreachable, timed out, or a transaction could not commit."""
