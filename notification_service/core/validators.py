"""Validators shared by routers."""

from __future__ import annotations

from uuid import UUID


def parse_uuid(value: str) -> UUID | None:
    """Parse a resource id, returning None for anything that is not a UUID.

    Routers treat an unparseable id exactly like an id that matches no row.
    """
    try:
        return UUID(value)
    except ValueError:
        return None


__all__ = ["parse_uuid"]
