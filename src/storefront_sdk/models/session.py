"""Session claim models for the storefront SDK."""
from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, Field, field_validator

from .base import StorefrontModel

ROLE_CLAIM_URI = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"


class Role(str, Enum):
    """Role carried in the credential."""

    USER = "User"
    ADMIN = "Admin"


class SessionClaims(StorefrontModel):
    """Identity claims read from the credential payload.

    These are advisory: they personalise the UI but are never an
    authorization decision. The backend re-checks every call.
    """

    subject_id: str = Field(alias="sub")
    given_name: str = ""
    family_name: str = ""
    email: Optional[str] = None
    role: Role = Field(validation_alias=AliasChoices("role", ROLE_CLAIM_URI))
    expiry_epoch_seconds: int = Field(alias="exp")

    @field_validator("subject_id", mode="before")
    @classmethod
    def _subject_as_text(cls, value):
        return str(value) if isinstance(value, int) else value

    def is_current(self, now: float) -> bool:
        return self.expiry_epoch_seconds > now


class Identity(StorefrontModel):
    """Projection of the claims used by views and order submission."""

    id: Union[int, str]
    name: str
    surname: str
    role: Role
    email: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "Identity":
        subject = claims.subject_id
        return cls(
            id=int(subject) if subject.isdigit() else subject,
            name=claims.given_name,
            surname=claims.family_name,
            role=claims.role,
            email=claims.email,
        )
