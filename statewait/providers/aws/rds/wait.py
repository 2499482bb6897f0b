"""Waiters for RDS resource transitions.

Every waiter is one row of POLICIES (which labels are pending, which are
the target, default cadence) plus a probe from ``status``. The functions
below only pair the two and hand them to the generic engine.

Cadence can be tuned per waiter through statewait.toml, keyed by the
POLICIES name:

    [waiters.db_instance_deleted]
    min_interval = 20
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from loguru import logger

from statewait.cancel import CancelToken
from statewait.config import RawConfig, resolve_overrides
from statewait.spec import Duration, WaitPolicy
from statewait.waiter import wait_for_state

from .constants import (
    ACTIVITY_STREAM_DELAY,
    ACTIVITY_STREAM_MIN_INTERVAL,
    DB_CLUSTER_ROLE_ASSOCIATION_CREATED_TIMEOUT,
    DB_CLUSTER_ROLE_ASSOCIATION_DELETED_TIMEOUT,
    DB_INSTANCE_DELAY,
    DB_INSTANCE_MIN_INTERVAL,
    EVENT_SUBSCRIPTION_DELAY,
    EVENT_SUBSCRIPTION_MIN_INTERVAL,
    ActivityStreamStatus,
    ClusterRoleStatus,
    DBProxyEndpointStatus,
    EventSubscriptionStatus,
    InstanceStatus,
)
from .status import (
    AsyncProbe,
    status_db_cluster_activity_stream,
    status_db_cluster_role,
    status_db_instance,
    status_db_proxy_endpoint,
    status_event_subscription,
)

if TYPE_CHECKING:
    from types_aiobotocore_rds import RDSClient


def _labels(*labels: str) -> frozenset[str]:
    return frozenset(labels)


POLICIES: Final[Mapping[str, WaitPolicy]] = MappingProxyType({
    "event_subscription_created": WaitPolicy(
        pending=_labels(EventSubscriptionStatus.CREATING),
        target=_labels(EventSubscriptionStatus.ACTIVE),
        delay=EVENT_SUBSCRIPTION_DELAY,
        min_interval=EVENT_SUBSCRIPTION_MIN_INTERVAL,
    ),
    "event_subscription_updated": WaitPolicy(
        pending=_labels(EventSubscriptionStatus.MODIFYING),
        target=_labels(EventSubscriptionStatus.ACTIVE),
        delay=EVENT_SUBSCRIPTION_DELAY,
        min_interval=EVENT_SUBSCRIPTION_MIN_INTERVAL,
    ),
    "event_subscription_deleted": WaitPolicy(
        pending=_labels(EventSubscriptionStatus.DELETING),
        delay=EVENT_SUBSCRIPTION_DELAY,
        min_interval=EVENT_SUBSCRIPTION_MIN_INTERVAL,
    ),
    "db_proxy_endpoint_available": WaitPolicy(
        pending=_labels(DBProxyEndpointStatus.CREATING, DBProxyEndpointStatus.MODIFYING),
        target=_labels(DBProxyEndpointStatus.AVAILABLE),
    ),
    "db_proxy_endpoint_deleted": WaitPolicy(
        pending=_labels(DBProxyEndpointStatus.DELETING),
    ),
    "db_cluster_role_association_created": WaitPolicy(
        pending=_labels(ClusterRoleStatus.PENDING),
        target=_labels(ClusterRoleStatus.ACTIVE),
        timeout=DB_CLUSTER_ROLE_ASSOCIATION_CREATED_TIMEOUT,
    ),
    "db_cluster_role_association_deleted": WaitPolicy(
        pending=_labels(ClusterRoleStatus.ACTIVE, ClusterRoleStatus.PENDING),
        timeout=DB_CLUSTER_ROLE_ASSOCIATION_DELETED_TIMEOUT,
    ),
    "db_instance_available": WaitPolicy(
        pending=_labels(
            InstanceStatus.BACKING_UP,
            InstanceStatus.CONFIGURING_ENHANCED_MONITORING,
            InstanceStatus.CONFIGURING_IAM_DATABASE_AUTH,
            InstanceStatus.CONFIGURING_LOG_EXPORTS,
            InstanceStatus.CREATING,
            InstanceStatus.MAINTENANCE,
            InstanceStatus.MODIFYING,
            InstanceStatus.MOVING_TO_VPC,
            InstanceStatus.REBOOTING,
            InstanceStatus.RENAMING,
            InstanceStatus.RESETTING_MASTER_CREDENTIALS,
            InstanceStatus.STARTING,
            InstanceStatus.UPGRADING,
        ),
        target=_labels(InstanceStatus.AVAILABLE, InstanceStatus.STORAGE_OPTIMIZATION),
        delay=DB_INSTANCE_DELAY,
        min_interval=DB_INSTANCE_MIN_INTERVAL,
    ),
    "db_instance_deleted": WaitPolicy(
        pending=_labels(
            InstanceStatus.AVAILABLE,
            InstanceStatus.BACKING_UP,
            InstanceStatus.CONFIGURING_ENHANCED_MONITORING,
            InstanceStatus.CONFIGURING_LOG_EXPORTS,
            InstanceStatus.CREATING,
            InstanceStatus.DELETING,
            InstanceStatus.INCOMPATIBLE_PARAMETERS,
            InstanceStatus.MODIFYING,
            InstanceStatus.STARTING,
            InstanceStatus.STOPPING,
            InstanceStatus.STORAGE_FULL,
            InstanceStatus.STORAGE_OPTIMIZATION,
        ),
        delay=DB_INSTANCE_DELAY,
        min_interval=DB_INSTANCE_MIN_INTERVAL,
    ),
    "db_cluster_instance_deleted": WaitPolicy(
        pending=_labels(
            InstanceStatus.CONFIGURING_LOG_EXPORTS,
            InstanceStatus.DELETING,
            InstanceStatus.MODIFYING,
        ),
        delay=DB_INSTANCE_DELAY,
        min_interval=DB_INSTANCE_MIN_INTERVAL,
    ),
    "activity_stream_started": WaitPolicy(
        pending=_labels(ActivityStreamStatus.STARTING),
        target=_labels(ActivityStreamStatus.STARTED),
        delay=ACTIVITY_STREAM_DELAY,
        min_interval=ACTIVITY_STREAM_MIN_INTERVAL,
    ),
    "activity_stream_stopped": WaitPolicy(
        pending=_labels(ActivityStreamStatus.STOPPING),
        target=_labels(ActivityStreamStatus.STOPPED),
        delay=ACTIVITY_STREAM_DELAY,
        min_interval=ACTIVITY_STREAM_MIN_INTERVAL,
    ),
})


async def _wait(
    name: str,
    probe: AsyncProbe,
    *,
    description: str,
    timeout: Duration | None,
    config: RawConfig | None,
    cancel: CancelToken | None,
) -> dict[str, Any] | None:
    overrides = resolve_overrides(name, config) if config is not None else {}
    spec = POLICIES[name].to_spec(
        probe, timeout=timeout, description=description, overrides=overrides
    )
    return await wait_for_state(spec, cancel=cancel)


# =============================================================================
# Event Subscriptions
# =============================================================================


async def wait_event_subscription_created(
    client: RDSClient,
    name: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "event_subscription_created",
        status_event_subscription(client, name),
        description=f"RDS Event Subscription ({name})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_event_subscription_updated(
    client: RDSClient,
    name: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "event_subscription_updated",
        status_event_subscription(client, name),
        description=f"RDS Event Subscription ({name})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_event_subscription_deleted(
    client: RDSClient,
    name: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "event_subscription_deleted",
        status_event_subscription(client, name),
        description=f"RDS Event Subscription ({name})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


# =============================================================================
# DB Proxy Endpoints
# =============================================================================


async def wait_db_proxy_endpoint_available(
    client: RDSClient,
    proxy_name: str,
    endpoint_name: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_proxy_endpoint_available",
        status_db_proxy_endpoint(client, proxy_name, endpoint_name),
        description=f"RDS DB Proxy Endpoint ({proxy_name}/{endpoint_name})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_db_proxy_endpoint_deleted(
    client: RDSClient,
    proxy_name: str,
    endpoint_name: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_proxy_endpoint_deleted",
        status_db_proxy_endpoint(client, proxy_name, endpoint_name),
        description=f"RDS DB Proxy Endpoint ({proxy_name}/{endpoint_name})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


# =============================================================================
# DB Cluster Role Associations
# =============================================================================


async def wait_db_cluster_role_association_created(
    client: RDSClient,
    cluster_id: str,
    role_arn: str,
    timeout: Duration | None = None,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_cluster_role_association_created",
        status_db_cluster_role(client, cluster_id, role_arn),
        description=f"RDS DB Cluster ({cluster_id}) IAM Role ({role_arn}) association",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_db_cluster_role_association_deleted(
    client: RDSClient,
    cluster_id: str,
    role_arn: str,
    timeout: Duration | None = None,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_cluster_role_association_deleted",
        status_db_cluster_role(client, cluster_id, role_arn),
        description=f"RDS DB Cluster ({cluster_id}) IAM Role ({role_arn}) association",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


# =============================================================================
# DB Instances
# =============================================================================


async def wait_db_instance_available(
    client: RDSClient,
    instance_id: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_instance_available",
        status_db_instance(client, instance_id),
        description=f"RDS DB Instance ({instance_id})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_db_instance_deleted(
    client: RDSClient,
    instance_id: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_instance_deleted",
        status_db_instance(client, instance_id),
        description=f"RDS DB Instance ({instance_id})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_db_cluster_instance_deleted(
    client: RDSClient,
    instance_id: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> dict[str, Any] | None:
    return await _wait(
        "db_cluster_instance_deleted",
        status_db_instance(client, instance_id),
        description=f"RDS Cluster Instance ({instance_id})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


# =============================================================================
# Database Activity Streams
# =============================================================================


async def wait_activity_stream_started(
    client: RDSClient,
    cluster_id: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> None:
    logger.debug(f"Waiting for RDS Cluster Activity Stream {cluster_id} to become started...")
    await _wait(
        "activity_stream_started",
        status_db_cluster_activity_stream(client, cluster_id),
        description=f"RDS Cluster Activity Stream ({cluster_id})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )


async def wait_activity_stream_stopped(
    client: RDSClient,
    cluster_id: str,
    timeout: Duration,
    *,
    config: RawConfig | None = None,
    cancel: CancelToken | None = None,
) -> None:
    logger.debug(f"Waiting for RDS Cluster Activity Stream {cluster_id} to become stopped...")
    await _wait(
        "activity_stream_stopped",
        status_db_cluster_activity_stream(client, cluster_id),
        description=f"RDS Cluster Activity Stream ({cluster_id})",
        timeout=timeout,
        config=config,
        cancel=cancel,
    )
