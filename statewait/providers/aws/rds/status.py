"""Status probes for RDS resources.

Each ``status_*`` function closes over an aiobotocore RDS client and an
identifier and returns a probe for WaitSpec. A probe performs one describe
call, maps the API's "not found" errors to ``Observation.absent()`` and
re-raises every other error for the waiter to classify. Throttling is
retried a bounded number of times inside the probe so it still returns
promptly.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from statewait.spec import Observation

from .constants import (
    DB_CLUSTER_NOT_FOUND_CODES,
    DB_INSTANCE_NOT_FOUND_CODES,
    DB_PROXY_NOT_FOUND_CODES,
    EVENT_SUBSCRIPTION_NOT_FOUND_CODES,
    THROTTLING_CODES,
)

if TYPE_CHECKING:
    from types_aiobotocore_rds import RDSClient

type AsyncProbe = Callable[[], Awaitable[Observation[dict[str, Any]]]]


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def _is_throttling_error(exc: BaseException) -> bool:
    """Check if exception is a retriable API throttling error."""
    return _error_code(exc) in THROTTLING_CODES


_throttle_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, max=4),
    retry=retry_if_exception(_is_throttling_error),
    reraise=True,
)


# =============================================================================
# Finders
# =============================================================================


@_throttle_retry
async def find_event_subscription(client: RDSClient, name: str) -> dict[str, Any] | None:
    try:
        output = await client.describe_event_subscriptions(SubscriptionName=name)
    except ClientError as e:
        if _error_code(e) in EVENT_SUBSCRIPTION_NOT_FOUND_CODES:
            return None
        raise

    for subscription in output.get("EventSubscriptionsList") or []:
        if subscription.get("CustSubscriptionId") == name:
            return dict(subscription)
    return None


@_throttle_retry
async def find_db_proxy_endpoint(
    client: RDSClient, proxy_name: str, endpoint_name: str
) -> dict[str, Any] | None:
    try:
        output = await client.describe_db_proxy_endpoints(
            DBProxyName=proxy_name,
            DBProxyEndpointName=endpoint_name,
        )
    except ClientError as e:
        if _error_code(e) in DB_PROXY_NOT_FOUND_CODES:
            return None
        raise

    for endpoint in output.get("DBProxyEndpoints") or []:
        if endpoint.get("DBProxyEndpointName") == endpoint_name:
            return dict(endpoint)
    return None


@_throttle_retry
async def find_db_cluster(client: RDSClient, cluster_id: str) -> dict[str, Any] | None:
    try:
        output = await client.describe_db_clusters(DBClusterIdentifier=cluster_id)
    except ClientError as e:
        if _error_code(e) in DB_CLUSTER_NOT_FOUND_CODES:
            return None
        raise

    for cluster in output.get("DBClusters") or []:
        if cluster.get("DBClusterIdentifier") == cluster_id:
            return dict(cluster)
    return None


@_throttle_retry
async def find_db_instance(client: RDSClient, instance_id: str) -> dict[str, Any] | None:
    try:
        output = await client.describe_db_instances(DBInstanceIdentifier=instance_id)
    except ClientError as e:
        if _error_code(e) in DB_INSTANCE_NOT_FOUND_CODES:
            return None
        raise

    for instance in output.get("DBInstances") or []:
        if instance.get("DBInstanceIdentifier") == instance_id:
            return dict(instance)
    return None


async def find_db_cluster_role(
    client: RDSClient, cluster_id: str, role_arn: str
) -> dict[str, Any] | None:
    cluster = await find_db_cluster(client, cluster_id)
    if cluster is None:
        return None

    for role in cluster.get("AssociatedRoles") or []:
        if role.get("RoleArn") == role_arn:
            return dict(role)
    return None


# =============================================================================
# Probes
# =============================================================================


def status_event_subscription(client: RDSClient, name: str) -> AsyncProbe:
    async def probe() -> Observation[dict[str, Any]]:
        subscription = await find_event_subscription(client, name)
        if subscription is None:
            return Observation.absent()
        return Observation(subscription["Status"], subscription)

    return probe


def status_db_proxy_endpoint(client: RDSClient, proxy_name: str, endpoint_name: str) -> AsyncProbe:
    async def probe() -> Observation[dict[str, Any]]:
        endpoint = await find_db_proxy_endpoint(client, proxy_name, endpoint_name)
        if endpoint is None:
            return Observation.absent()
        return Observation(endpoint["Status"], endpoint)

    return probe


def status_db_cluster_role(client: RDSClient, cluster_id: str, role_arn: str) -> AsyncProbe:
    async def probe() -> Observation[dict[str, Any]]:
        role = await find_db_cluster_role(client, cluster_id, role_arn)
        if role is None:
            return Observation.absent()
        return Observation(role["Status"], role)

    return probe


def status_db_instance(client: RDSClient, instance_id: str) -> AsyncProbe:
    async def probe() -> Observation[dict[str, Any]]:
        instance = await find_db_instance(client, instance_id)
        if instance is None:
            return Observation.absent()
        return Observation(instance["DBInstanceStatus"], instance)

    return probe


def status_db_cluster_activity_stream(client: RDSClient, cluster_id: str) -> AsyncProbe:
    async def probe() -> Observation[dict[str, Any]]:
        cluster = await find_db_cluster(client, cluster_id)
        if cluster is None:
            return Observation.absent()
        return Observation(cluster["ActivityStreamStatus"], cluster)

    return probe
