# ==============================================================================
# OBJECT STORAGE - Proof-of-Payment Images
# ==============================================================================
# Delete-by-reference clients for uploaded proof images
# ==============================================================================

from __future__ import annotations

import hashlib
import logging
import re
import time
from typing import Optional, Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

import httpx

from order_desk.core.constants import ErrorMessages
from order_desk.core.exceptions import DependencyFailureError
from order_desk.core.settings import settings
from order_desk.integrations.base import HTTPServiceClient

logger = logging.getLogger(__name__)

_VERSION_SEGMENT = re.compile(r"^v\d+$")


@runtime_checkable
class ObjectStorageClient(Protocol):
    """Anything that can delete a stored object given its reference."""

    async def delete(self, reference: str) -> None:
        """
        Delete the object; an already missing object counts as deleted.

        Raises:
            DependencyFailureError: If the storage service fails
        """
        ...


def public_id_from_url(reference: str) -> str:
    """
    Derive a Cloudinary public id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1712/proofs/abc.jpg``
    becomes ``proofs/abc``. References that are not delivery URLs are
    taken to be public ids already.
    """
    path = unquote(urlparse(reference).path) if "://" in reference else reference
    marker = "/upload/"
    if marker in path:
        path = path.split(marker, 1)[1]

    segments = [s for s in path.split("/") if s]
    if segments and _VERSION_SEGMENT.match(segments[0]):
        segments = segments[1:]
    if not segments:
        raise ValueError(f"No public id in storage reference {reference!r}")

    last = segments[-1]
    if "." in last:
        segments[-1] = last.rsplit(".", 1)[0]
    return "/".join(segments)


class CloudinaryStorageClient(HTTPServiceClient):
    """
    Cloudinary image deletion through the signed ``destroy`` endpoint.

    Example:
        >>> storage = CloudinaryStorageClient()
        >>> await storage.delete(order.proof_image_ref)
    """

    dependency = "object storage"
    API_BASE = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self._api_key = api_key or settings.CLOUDINARY_API_KEY
        self._api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        super().__init__(
            base_url=f"{self.API_BASE}/{self._cloud_name}",
            timeout=timeout,
            transport=transport,
        )

    def _sign(self, params: dict) -> str:
        """SHA-1 signature over the sorted parameters and the API secret."""
        payload = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(
            f"{payload}{self._api_secret}".encode("utf-8")
        ).hexdigest()

    async def delete(self, reference: str) -> None:
        try:
            public_id = public_id_from_url(reference)
        except ValueError as e:
            raise self._failure("delete", str(e)) from e

        params = {"public_id": public_id, "timestamp": int(time.time())}
        form = {
            **params,
            "api_key": self._api_key,
            "signature": self._sign(params),
        }

        response = await self._request(
            "POST",
            "/image/destroy",
            operation="delete",
            data=form,
        )
        if response.status_code != 200:
            raise self._failure(
                "delete",
                f"HTTP {response.status_code}",
                details={"public_id": public_id},
            )

        body = self._json(response, "delete")
        result = body.get("result") if isinstance(body, dict) else None
        if result == "not found":
            logger.info(f"Proof image {public_id} was already gone")
        elif result != "ok":
            raise self._failure(
                "delete",
                f"unexpected result {result!r}",
                details={"public_id": public_id},
            )
        else:
            logger.info(f"Deleted proof image {public_id}")


class UnconfiguredStorageClient:
    """Stand-in used when no storage credentials are configured."""

    async def delete(self, reference: str) -> None:
        raise DependencyFailureError(
            message=ErrorMessages.STORAGE_NOT_CONFIGURED,
            dependency="object storage",
            operation="delete",
        )

    async def close(self) -> None:
        return None


def create_storage_client() -> ObjectStorageClient:
    """Storage client for the current configuration."""
    if settings.storage_configured:
        return CloudinaryStorageClient()
    logger.warning("Cloudinary credentials missing; proof images will not be deleted")
    return UnconfiguredStorageClient()
