"""Users resource for the storefront SDK (admin dashboards)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from ..models.errors import StorefrontError
from ..models.user import User, UserUpdate
from .base import AsyncBaseResource

logger = logging.getLogger(__name__)


class UsersResource(AsyncBaseResource):
    """User administration."""

    async def list_all(self) -> List[User]:
        response = await self._get("/user/all")
        return [self._model(User, u) for u in response.items()]

    async def join_date(self, user_id: Union[int, str]) -> datetime:
        """Registration date of a user.

        Falls back to the current time when the backend cannot answer, so
        profile views always have something to show.
        """
        try:
            response = await self._get(f"/user/{user_id}/joindate")
        except StorefrontError as e:
            logger.warning(f"Could not fetch join date for user {user_id}: {e}")
            return datetime.now(timezone.utc)
        raw = response.first()
        if response.success and isinstance(raw, str):
            try:
                return datetime.fromisoformat(raw.replace("Z", "+00:00"))
            except ValueError:
                logger.debug(f"Unparseable join date {raw!r} for user {user_id}")
        return datetime.now(timezone.utc)

    async def update(self, user_id: Union[int, str], changes: UserUpdate) -> Optional[User]:
        response = await self._put(f"/user/update/{user_id}", changes.to_dict())
        data = response.first()
        return self._model(User, data) if isinstance(data, dict) else None

    async def delete(self, user_id: Union[int, str]) -> bool:
        response = await self._delete(f"/user/{user_id}")
        return response.success
