"""Catalog models for the storefront SDK."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from .base import StorefrontModel


class Product(StorefrontModel):
    """A catalog product as served by the product endpoints."""

    id: int
    name: str
    category: str = ""
    description: str = ""
    price: Decimal = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    base64_image: Optional[str] = Field(default=None, alias="base64Image")
    is_visible: Optional[bool] = Field(default=None, alias="isVisible")


class ProductInput(StorefrontModel):
    """Body for creating or updating a product (admin)."""

    name: str
    category: str
    description: str = ""
    price: Decimal = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    base64_image: Optional[str] = Field(default=None, alias="base64Image")
    is_visible: Optional[bool] = Field(default=None, alias="isVisible")


class Category(StorefrontModel):
    """A product category."""

    id: int
    name: str
    is_active: bool = Field(default=True, alias="isActive")
