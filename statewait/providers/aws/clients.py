"""AWS client factories with dependency injection.

Provides typed client factories that can be injected into components.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any

import aioboto3
from botocore.config import Config
from injector import Binder, Module, provider, singleton

from .config import AWS

if TYPE_CHECKING:
    from types_aiobotocore_rds import RDSClient


def botocore_config(config: AWS) -> Config:
    """Per-call timeouts and retries for clients used by probes."""
    return Config(
        connect_timeout=config.request_timeout,
        read_timeout=config.request_timeout,
        retries={"max_attempts": config.max_attempts, "mode": "standard"},
    )


# =============================================================================
# Wrapper Classes for DI (each needs a unique type)
# =============================================================================


class RDSClientFactory:
    """Wrapper for RDS client factory."""

    def __init__(self, factory: Callable[[], AbstractAsyncContextManager[Any]]) -> None:
        self._factory = factory

    def __call__(self) -> AbstractAsyncContextManager[RDSClient]:
        return self._factory()


# =============================================================================
# AWS Module
# =============================================================================


class AWSModule(Module):
    """DI module that provides AWS client factories.

    Usage:
        >>> from injector import Injector
        >>> from statewait.providers.aws import AWS, AWSModule, RDSClientFactory
        >>>
        >>> injector = Injector([AWSModule(AWS(region="us-east-1"))])
        >>> rds = injector.get(RDSClientFactory)
        >>>
        >>> async with rds() as client:
        ...     await wait_db_instance_deleted(client, "db-1", timeout=3600)
    """

    def __init__(self, config: AWS | None = None) -> None:
        self._config = config

    def configure(self, binder: Binder) -> None:
        if self._config is not None:
            binder.bind(AWS, to=self._config)

    @singleton
    @provider
    def provide_session(self, config: AWS) -> aioboto3.Session:
        """Provide singleton aioboto3 session."""
        return aioboto3.Session(profile_name=config.profile)

    @singleton
    @provider
    def provide_rds(self, session: aioboto3.Session, config: AWS) -> RDSClientFactory:
        """Provide RDS client factory."""
        @asynccontextmanager
        async def factory() -> AsyncIterator[Any]:
            async with session.client(
                "rds",
                region_name=config.region,
                config=botocore_config(config),
            ) as client:
                yield client
        return RDSClientFactory(factory)


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "AWSModule",
    "RDSClientFactory",
    "botocore_config",
]
