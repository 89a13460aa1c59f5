"""Address models for the storefront SDK."""
from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import Field

from .base import StorefrontModel
from .errors import ValidationError


class UserAddress(StorefrontModel):
    """A delivery address owned by a user."""

    id: Optional[int] = None
    label: str = ""
    street: str
    city: str
    postal_code: str = Field(alias="postalCode")
    country: str
    phone_area_code: str = Field(default="", alias="phoneAreaCode")
    phone_number: str = Field(default="", alias="phoneNumber")
    is_default: bool = Field(default=False, alias="isDefault")

    def one_line(self) -> str:
        parts = [self.street, f"{self.postal_code} {self.city}".strip(), self.country]
        text = ", ".join(p for p in parts if p)
        return f"{self.label}: {text}" if self.label else text


class AddressForm(StorefrontModel):
    """New-address form filled in during checkout."""

    label: str = ""
    street: str = ""
    city: str = ""
    postal_code: str = Field(default="", alias="postalCode")
    country: str = ""
    phone_area_code: str = Field(default="", alias="phoneAreaCode")
    phone_number: str = Field(default="", alias="phoneNumber")
    is_default: bool = Field(default=False, alias="isDefault")

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "label",
        "street",
        "city",
        "postal_code",
        "country",
        "phone_area_code",
        "phone_number",
    )

    def validate_required(self) -> None:
        """Raise ValidationError for the first required field that is blank after trimming."""
        for name in self.REQUIRED_FIELDS:
            if not str(getattr(self, name) or "").strip():
                raise ValidationError(f"{name.replace('_', ' ').capitalize()} is required", field=name)

    def to_address(self, user_id: Optional[int] = None) -> dict:
        """Trimmed creation payload, tagged with the owning user."""
        payload = {
            "label": self.label.strip(),
            "street": self.street.strip(),
            "city": self.city.strip(),
            "postalCode": self.postal_code.strip(),
            "country": self.country.strip(),
            "phoneAreaCode": self.phone_area_code.strip(),
            "phoneNumber": self.phone_number.strip(),
            "isDefault": self.is_default,
        }
        if user_id is not None:
            payload["userId"] = user_id
        return payload
