"""Uniform operation results.

Every public operation answers with ``Ok(value)`` or ``Failure(kind,
message)``; expected conditions never escape as exceptions. Analytics can
additionally answer ``Ok(NoData(...))``, which is a successful "nothing
to measure", not a failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, TypeVar, Union

from ims.domain.exceptions import (
    BatchProblem,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    problems: list[BatchProblem] = field(default_factory=list)
    ok: bool = field(default=False, init=False)


Result = Union[Ok[T], Failure]


def capture(operation: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Run ``operation`` and fold its outcome into a Result."""
    try:
        return Ok(operation(*args, **kwargs))
    except ValidationError as exc:
        return Failure(ErrorKind.VALIDATION, str(exc), exc.problems)
    except EntityNotFoundError as exc:
        return Failure(ErrorKind.NOT_FOUND, str(exc), exc.problems)
    except PersistenceError as exc:
        logger.error("Store failure in %s: %s", getattr(operation, "__qualname__", operation), exc)
        return Failure(ErrorKind.PERSISTENCE, str(exc))
    except Exception as exc:
        logger.exception("Unexpected failure in %s", getattr(operation, "__qualname__", operation))
        return Failure(ErrorKind.PERSISTENCE, f"Unexpected store failure: {exc}")
