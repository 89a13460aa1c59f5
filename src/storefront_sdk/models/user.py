"""User models for the storefront SDK."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from .address import UserAddress
from .base import StorefrontModel
from .errors import ValidationError


class User(StorefrontModel):
    """A registered shop user (admin views)."""

    id: int
    name: str
    surname: str = ""
    email: str = ""
    role: str = "User"
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    date_of_birth: Optional[date] = Field(default=None, alias="dateOfBirth")
    is_active: bool = Field(default=True, alias="isActive")
    addresses: Optional[list[UserAddress]] = None


class UserUpdate(StorefrontModel):
    """Partial update of a user record."""

    name: Optional[str] = None
    surname: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class RegistrationForm(StorefrontModel):
    """Sign-up form, validated locally before anything is sent."""

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""
    phone_number: str = Field(default="", alias="phoneNumber")
    date_of_birth: str = Field(default="", alias="dateOfBirth")
    password: str = ""
    confirm_password: str = Field(default="", alias="confirmPassword")
    agree_to_terms: bool = Field(default=False, alias="agreeToTerms")

    def validate_form(self) -> None:
        for name in ("first_name", "last_name", "email", "password"):
            if not getattr(self, name).strip():
                raise ValidationError(f"{name.replace('_', ' ').capitalize()} is required", field=name)
        if self.password != self.confirm_password:
            raise ValidationError("Passwords do not match", field="confirm_password")
        if not self.agree_to_terms:
            raise ValidationError(
                "Please agree to the Terms of Service and Privacy Policy",
                field="agree_to_terms",
            )

    def form_fields(self) -> dict[str, str]:
        """Multipart form fields for ``POST /auth/register``."""
        fields = {
            "name": self.first_name.strip(),
            "surname": self.last_name.strip(),
            "email": self.email.strip(),
            "password": self.password,
        }
        if self.phone_number.strip():
            fields["phoneNumber"] = self.phone_number.strip()
        if self.date_of_birth.strip():
            fields["dateOfBirth"] = self.date_of_birth.strip()
        return fields


def password_strength(password: str) -> str:
    if not password:
        return ""
    if len(password) < 6:
        return "Weak"
    if len(password) < 10:
        return "Medium"
    return "Strong"
