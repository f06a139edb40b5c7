"""
MongoDB connection bootstrap for the index provider.

The url comes from the provider configuration when set, otherwise from the
MONGODB_URL environment variable (a local .env file is honoured).
"""
import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from index_provider.config import MONGODB_URL_ENV, OPERATION_TIMEOUT_ENV, SERVER_API_VERSION
from index_provider.core.errors import ProviderConfigError

load_dotenv()

logger = logging.getLogger(__name__)


def resolve_mongo_url(url: Optional[str] = None) -> str:
    """Explicit provider url wins over the environment; empty is an error."""
    resolved = os.getenv(MONGODB_URL_ENV, "")
    if url is not None:
        resolved = url

    if not resolved:
        raise ProviderConfigError(
            "The provider cannot create the MongoDB client as there is a missing or empty value for the url. "
            f"Set the url value in the configuration or use the {MONGODB_URL_ENV} environment variable.",
            operation="configure",
        )
    return resolved


def resolve_operation_timeout(timeout: Optional[float] = None) -> Optional[float]:
    """Default per-call deadline in seconds, None meaning no deadline."""
    if timeout is not None:
        return timeout

    raw = os.getenv(OPERATION_TIMEOUT_ENV)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ProviderConfigError(
            f"{OPERATION_TIMEOUT_ENV} must be a number of seconds, got '{raw}'",
            operation="configure",
            cause=e,
        ) from e
    if value < 0:
        raise ProviderConfigError(
            f"{OPERATION_TIMEOUT_ENV} must not be negative, got {value}",
            operation="configure",
        )
    return value


def create_client(url: Optional[str] = None) -> MongoClient:
    """
    Build the client shared by every index resource of this provider.

    pymongo connects lazily, so this only fails on unusable settings
    (bad URI, unknown options), not on an unreachable server.
    """
    logger.info("Configuring MongoDB provider")
    resolved = resolve_mongo_url(url)

    logger.info("Creating MongoDB client")
    try:
        client = MongoClient(resolved, server_api=ServerApi(SERVER_API_VERSION))
    except PyMongoError as e:
        raise ProviderConfigError(
            "Unable to Create MongoDB Client",
            operation="configure",
            cause=e,
        ) from e

    logger.info("Configured MongoDB provider")
    return client
