# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies for authentication, database access and services
# ==============================================================================

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from order_desk.core.constants import ErrorMessages
from order_desk.core.exceptions import AuthenticationError, AuthorizationError
from order_desk.core.security import CallerIdentity, verify_access_token
from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter
from order_desk.database.factory import DatabaseFactory
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)
from order_desk.integrations.identity import (
    IdentityDirectoryClient,
    create_identity_client,
)
from order_desk.integrations.price_oracle import CoinGeckoPriceOracle
from order_desk.integrations.storage import ObjectStorageClient, create_storage_client
from order_desk.services.deletion_service import DeletionService
from order_desk.services.statistics_service import StatisticsService
from order_desk.services.transaction_service import TransactionService

# Bearer tokens issued by the identity provider
bearer_scheme = HTTPBearer(auto_error=False)


# ==============================================================================
# DATABASE DEPENDENCIES
# ==============================================================================

async def get_adapter() -> BaseDatabaseAdapter:
    """Initialized adapter from the factory."""
    return DatabaseFactory.get_adapter()


DatabaseDep = Annotated[BaseDatabaseAdapter, Depends(get_adapter)]


async def get_repository(adapter: DatabaseDep) -> TransactionRepository:
    return TransactionRepository(adapter)


RepositoryDep = Annotated[TransactionRepository, Depends(get_repository)]


# ==============================================================================
# AUTHENTICATION DEPENDENCIES
# ==============================================================================

async def get_current_caller(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials],
        Depends(bearer_scheme),
    ],
) -> CallerIdentity:
    """
    Verified caller from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: If the header is missing or the token invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message=ErrorMessages.UNAUTHORIZED)
    return verify_access_token(credentials.credentials)


CurrentCaller = Annotated[CallerIdentity, Depends(get_current_caller)]


async def require_admin(caller: CurrentCaller) -> CallerIdentity:
    """
    Raises:
        AuthorizationError: If the caller lacks the admin role
    """
    if not caller.is_admin:
        raise AuthorizationError(
            message=ErrorMessages.ADMIN_REQUIRED,
            required_permission="admin",
        )
    return caller


AdminCaller = Annotated[CallerIdentity, Depends(require_admin)]


# ==============================================================================
# EXTERNAL SERVICE DEPENDENCIES
# ==============================================================================
# Shared clients; closed by the application lifespan.

@lru_cache()
def get_storage_client() -> ObjectStorageClient:
    return create_storage_client()


@lru_cache()
def get_identity_client() -> Optional[IdentityDirectoryClient]:
    return create_identity_client()


@lru_cache()
def get_price_oracle() -> CoinGeckoPriceOracle:
    return CoinGeckoPriceOracle()


StorageDep = Annotated[ObjectStorageClient, Depends(get_storage_client)]
IdentityDep = Annotated[Optional[IdentityDirectoryClient], Depends(get_identity_client)]
PriceOracleDep = Annotated[CoinGeckoPriceOracle, Depends(get_price_oracle)]


# ==============================================================================
# SERVICE DEPENDENCIES
# ==============================================================================

async def get_statistics_service(
    repository: RepositoryDep,
) -> StatisticsService:
    return StatisticsService(repository)


StatisticsServiceDep = Annotated[StatisticsService, Depends(get_statistics_service)]


async def get_transaction_service(
    repository: RepositoryDep,
    statistics: StatisticsServiceDep,
) -> TransactionService:
    return TransactionService(repository, statistics)


async def get_deletion_service(
    repository: RepositoryDep,
    statistics: StatisticsServiceDep,
    storage: StorageDep,
    identity: IdentityDep,
) -> DeletionService:
    return DeletionService(
        repository,
        storage,
        statistics=statistics,
        identity=identity,
    )


TransactionServiceDep = Annotated[TransactionService, Depends(get_transaction_service)]
DeletionServiceDep = Annotated[DeletionService, Depends(get_deletion_service)]


async def close_external_clients() -> None:
    """Close shared HTTP clients that were created during the app's life."""
    for provider in (get_storage_client, get_identity_client, get_price_oracle):
        if provider.cache_info().currsize == 0:
            continue
        client = provider()
        if client is not None:
            await client.close()
        provider.cache_clear()
