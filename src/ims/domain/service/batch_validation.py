"""Shared helpers for the validate-all-then-apply-all bulk operations."""

from __future__ import annotations

from ims.domain.exceptions import BatchProblem, EntityNotFoundError, ValidationError


def reject_batch(shape_problems: list[BatchProblem], missing: list[BatchProblem]) -> None:
    """Raise the exception that describes a rejected batch, if any.

    Malformed entries win over unknown products: the caller has to fix
    the request before a lookup failure means anything.
    """
    if shape_problems:
        problems = shape_problems + missing
        noun = "entry" if len(problems) == 1 else "entries"
        raise ValidationError(
            f"Batch rejected, {len(problems)} invalid {noun}: "
            + "; ".join(str(p) for p in problems),
            problems=problems,
        )
    if missing:
        raise EntityNotFoundError(
            "Batch rejected, unknown product(s): " + "; ".join(str(p) for p in missing),
            problems=missing,
        )
