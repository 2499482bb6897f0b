"""RDS waiters: status vocabularies, probes and the waiter table.

Example:
    from statewait.providers.aws import AWS, AWSModule, RDSClientFactory
    from statewait.providers.aws.rds import wait_db_instance_deleted

    rds = Injector([AWSModule(AWS(region="eu-west-1"))]).get(RDSClientFactory)
    async with rds() as client:
        await client.delete_db_instance(DBInstanceIdentifier="db-1", SkipFinalSnapshot=True)
        await wait_db_instance_deleted(client, "db-1", timeout=3600)
"""

from statewait.providers.aws.rds.constants import (
    ActivityStreamStatus,
    ClusterRoleStatus,
    DBProxyEndpointStatus,
    EventSubscriptionStatus,
    InstanceStatus,
)
from statewait.providers.aws.rds.status import (
    status_db_cluster_activity_stream,
    status_db_cluster_role,
    status_db_instance,
    status_db_proxy_endpoint,
    status_event_subscription,
)
from statewait.providers.aws.rds.wait import (
    POLICIES,
    wait_activity_stream_started,
    wait_activity_stream_stopped,
    wait_db_cluster_instance_deleted,
    wait_db_cluster_role_association_created,
    wait_db_cluster_role_association_deleted,
    wait_db_instance_available,
    wait_db_instance_deleted,
    wait_db_proxy_endpoint_available,
    wait_db_proxy_endpoint_deleted,
    wait_event_subscription_created,
    wait_event_subscription_deleted,
    wait_event_subscription_updated,
)

__all__ = [
    "POLICIES",
    "ActivityStreamStatus",
    "ClusterRoleStatus",
    "DBProxyEndpointStatus",
    "EventSubscriptionStatus",
    "InstanceStatus",
    "status_db_cluster_activity_stream",
    "status_db_cluster_role",
    "status_db_instance",
    "status_db_proxy_endpoint",
    "status_event_subscription",
    "wait_activity_stream_started",
    "wait_activity_stream_stopped",
    "wait_db_cluster_instance_deleted",
    "wait_db_cluster_role_association_created",
    "wait_db_cluster_role_association_deleted",
    "wait_db_instance_available",
    "wait_db_instance_deleted",
    "wait_db_proxy_endpoint_available",
    "wait_db_proxy_endpoint_deleted",
    "wait_event_subscription_created",
    "wait_event_subscription_deleted",
    "wait_event_subscription_updated",
]
