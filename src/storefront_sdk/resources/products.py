"""
Products resource for the storefront SDK.

Catalog browsing for shoppers plus product management for admins.
"""
from __future__ import annotations

from typing import List, Optional

from ..models.errors import NotFoundError
from ..models.product import Product, ProductInput
from .base import AsyncBaseResource


class ProductsResource(AsyncBaseResource):
    """Product catalog operations.

    Example:
        ```python
        products = await client.products.list_visible()
        hits = await client.products.suggestions("lamp")
        product = await client.products.get(products[0].id)
        ```
    """

    async def list_all(self) -> List[Product]:
        """List every product, hidden ones included (admin views)."""
        response = await self._get("/product/all")
        return [self._model(Product, p) for p in response.items()]

    async def list_visible(self) -> List[Product]:
        """List products shown to shoppers."""
        response = await self._get("/product/all/visible")
        return [self._model(Product, p) for p in response.items()]

    async def suggestions(self, query: str) -> List[Product]:
        """Search-as-you-type suggestions.

        An empty query returns an empty list without calling the backend.
        """
        if not query or not query.strip():
            return []
        response = await self._get("/product/suggestions", params={"query": query})
        return [self._model(Product, p) for p in response.items()]

    async def get(self, product_id: int) -> Product:
        """Get the current state of one product, including authoritative stock.

        Raises:
            NotFoundError: when the backend returns no product
        """
        response = await self._get(f"/product/specified/{product_id}")
        data = response.first()
        if not data:
            raise NotFoundError(f"Product not found: {product_id}", details={"product_id": product_id})
        return self._model(Product, data)

    async def distinct_categories(self) -> List[str]:
        """Unique, sorted category names of the listed products."""
        products = await self.list_all()
        return sorted({p.category for p in products if p.category})

    async def create(self, product: ProductInput) -> Optional[Product]:
        """Create a product (admin)."""
        response = await self._post("/product/create", product.to_dict())
        data = response.first()
        return self._model(Product, data) if isinstance(data, dict) else None

    async def update(self, product_id: int, product: ProductInput) -> Optional[Product]:
        """Update a product (admin)."""
        response = await self._put(f"/product/update/{product_id}", product.to_dict())
        data = response.first()
        return self._model(Product, data) if isinstance(data, dict) else None

    async def delete(self, product_id: int) -> bool:
        """Delete a product (admin)."""
        response = await self._delete(f"/product/{product_id}")
        return response.success
