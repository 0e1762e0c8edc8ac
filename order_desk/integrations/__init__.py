# ==============================================================================
# INTEGRATIONS PACKAGE INITIALIZATION
# ==============================================================================

"""
External Service Clients
========================

- Object storage: proof-of-payment image deletion (Cloudinary)
- Price oracle: sell rate quotes (CoinGecko)
- Identity directory: account removal (identity provider admin API)
"""

from order_desk.integrations.identity import (
    IdentityDirectoryClient,
    create_identity_client,
)
from order_desk.integrations.price_oracle import CoinGeckoPriceOracle
from order_desk.integrations.storage import (
    CloudinaryStorageClient,
    ObjectStorageClient,
    UnconfiguredStorageClient,
    create_storage_client,
    public_id_from_url,
)

__all__ = [
    "IdentityDirectoryClient",
    "create_identity_client",
    "CoinGeckoPriceOracle",
    "CloudinaryStorageClient",
    "ObjectStorageClient",
    "UnconfiguredStorageClient",
    "create_storage_client",
    "public_id_from_url",
]
