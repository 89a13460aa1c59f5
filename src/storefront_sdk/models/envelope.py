"""Response envelope shared by every backend endpoint."""
from __future__ import annotations

from typing import Any, Optional

from .base import StorefrontModel


class ApiResponse(StorefrontModel):
    """``{success, data[], title, detail, status, ...}`` wrapper.

    ``data`` is declared as a list by the backend but several endpoints
    return a single object or a bare scalar there, so it is kept untyped and
    normalised through :meth:`items` / :meth:`first`.
    """

    success: bool = False
    data: Any = None
    title: Optional[str] = None
    detail: Optional[str] = None
    status: Optional[int] = None
    type: Optional[str] = None
    instance: Optional[str] = None
    timestamp: Optional[str] = None

    def items(self) -> list[Any]:
        if self.data is None:
            return []
        if isinstance(self.data, list):
            return self.data
        return [self.data]

    def first(self) -> Any:
        items = self.items()
        return items[0] if items else None
