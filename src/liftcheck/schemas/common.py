"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

# Identifier supplied by the auth provider or returned by this API.
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]

# Exercise names end every ranking scope key, e.g. ``gym_{gym}_{exercise}``.
ExerciseName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]

# Country and gym tags sit between separators in scope keys, so no underscores.
CountryTag = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64, pattern=r"^[^_]+$")
]
GymTag = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128, pattern=r"^[^_]+$")
]


class OkResponse(BaseModel):
    """Acknowledgement returned by command endpoints."""

    ok: bool = Field(True, description="Always true on success.")


class ErrorResponse(BaseModel):
    """Error body; ``error`` is a short machine-readable code."""

    error: str = Field(..., description="One of invalid_payload, unauthorized, not_found, rate_limited, internal.")
