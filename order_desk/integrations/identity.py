# ==============================================================================
# IDENTITY DIRECTORY - User Account Removal
# ==============================================================================

from __future__ import annotations

import logging
from typing import Optional

import httpx

from order_desk.core.settings import settings
from order_desk.integrations.base import HTTPServiceClient

logger = logging.getLogger(__name__)


class IdentityDirectoryClient(HTTPServiceClient):
    """
    Admin API of the identity provider (Clerk compatible).

    Only account removal is needed: ``DELETE {base}/users/{id}``
    authenticated with the provider's secret key.
    """

    dependency = "identity provider"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        api_key = api_key or settings.IDENTITY_API_KEY
        super().__init__(
            base_url=(base_url or settings.IDENTITY_API_URL or "").rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    async def delete_user(self, user_id: str) -> None:
        """
        Remove a user account; an unknown user counts as removed.

        Raises:
            DependencyFailureError: If the provider rejects the call
        """
        response = await self._request(
            "DELETE",
            f"/users/{user_id}",
            operation="delete_user",
        )
        if response.status_code == 404:
            logger.info(f"Identity {user_id} was already removed")
            return
        if response.status_code >= 400:
            raise self._failure(
                "delete_user",
                f"HTTP {response.status_code}",
                details={"user_id": user_id},
            )
        logger.info(f"Removed identity {user_id}")


def create_identity_client() -> Optional[IdentityDirectoryClient]:
    """Identity client when the admin API is configured, else None."""
    if settings.IDENTITY_API_URL and settings.IDENTITY_API_KEY:
        return IdentityDirectoryClient()
    return None
