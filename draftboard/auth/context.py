"""Explicit owner context passed into every repository and coordinator call."""

from __future__ import annotations

from dataclasses import dataclass

from draftboard.errors import OwnerRequired


@dataclass(frozen=True)
class OwnerContext:
    """The authenticated owner on whose behalf the core acts.

    Building one without an owner id raises ``OwnerRequired``, so the
    "no owner yet" case is rejected before any query starts.
    """

    owner_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.owner_id, str) or not self.owner_id.strip():
            raise OwnerRequired("An owner id is required before accessing posts")
