"""Categories resource for the storefront SDK."""
from __future__ import annotations

from typing import List, Optional

from ..models.product import Category
from .base import AsyncBaseResource


class CategoriesResource(AsyncBaseResource):
    """Product category sub-resource (admin)."""

    async def list(self) -> List[Category]:
        response = await self._get("/product/category/all")
        return [self._model(Category, c) for c in response.items()]

    async def create(self, name: str) -> Optional[Category]:
        response = await self._post("/product/category/create", {"name": name.strip()})
        data = response.first()
        return self._model(Category, data) if isinstance(data, dict) else None

    async def activate(self, category_id: int) -> bool:
        response = await self._put(f"/product/category/{category_id}/activate")
        return response.success

    async def deactivate(self, category_id: int) -> bool:
        response = await self._put(f"/product/category/{category_id}/deactivate")
        return response.success
