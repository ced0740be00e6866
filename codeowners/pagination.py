"""Validation of start/limit pagination parameters."""

from typing import TypeVar

from codeowners.errors import InvalidInputError

T = TypeVar("T")


def paginate(items: list[T], start: int = 0, limit: int | None = None) -> list[T]:
    """Return ``items[start:start + limit]``; negative values are rejected."""
    check_pagination(start, limit)
    end = None if limit is None else start + limit
    return items[start:end]


def check_pagination(start: int, limit: int | None) -> None:
    if start < 0:
        raise InvalidInputError(f"start cannot be negative: {start}")
    if limit is not None and limit <= 0:
        raise InvalidInputError(f"limit must be positive: {limit}")
