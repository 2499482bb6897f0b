"""RDS status vocabularies and waiter cadence constants."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

# =============================================================================
# Event Subscriptions
# =============================================================================


class EventSubscriptionStatus(StrEnum):
    ACTIVE = "active"
    CREATING = "creating"
    DELETING = "deleting"
    MODIFYING = "modifying"


# =============================================================================
# DB Proxy Endpoints
# =============================================================================


class DBProxyEndpointStatus(StrEnum):
    AVAILABLE = "available"
    CREATING = "creating"
    DELETING = "deleting"
    INCOMPATIBLE_NETWORK = "incompatible-network"
    INSUFFICIENT_RESOURCE_LIMITS = "insufficient-resource-limits"
    MODIFYING = "modifying"


# =============================================================================
# DB Cluster Role Associations
# =============================================================================


class ClusterRoleStatus(StrEnum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"
    PENDING = "PENDING"


# =============================================================================
# DB Instances
# =============================================================================


class InstanceStatus(StrEnum):
    AVAILABLE = "available"
    BACKING_UP = "backing-up"
    CONFIGURING_ENHANCED_MONITORING = "configuring-enhanced-monitoring"
    CONFIGURING_IAM_DATABASE_AUTH = "configuring-iam-database-auth"
    CONFIGURING_LOG_EXPORTS = "configuring-log-exports"
    CREATING = "creating"
    DELETING = "deleting"
    FAILED = "failed"
    INCOMPATIBLE_PARAMETERS = "incompatible-parameters"
    INCOMPATIBLE_RESTORE = "incompatible-restore"
    MAINTENANCE = "maintenance"
    MODIFYING = "modifying"
    MOVING_TO_VPC = "moving-to-vpc"
    REBOOTING = "rebooting"
    RENAMING = "renaming"
    RESETTING_MASTER_CREDENTIALS = "resetting-master-credentials"
    STARTING = "starting"
    STOPPED = "stopped"
    STOPPING = "stopping"
    STORAGE_FULL = "storage-full"
    STORAGE_OPTIMIZATION = "storage-optimization"
    UPGRADING = "upgrading"


# =============================================================================
# Database Activity Streams
# =============================================================================


class ActivityStreamStatus(StrEnum):
    STARTED = "started"
    STARTING = "starting"
    STOPPED = "stopped"
    STOPPING = "stopping"


# =============================================================================
# Cadence (in seconds)
# =============================================================================

EVENT_SUBSCRIPTION_DELAY: Final = 30
EVENT_SUBSCRIPTION_MIN_INTERVAL: Final = 10

DB_CLUSTER_ROLE_ASSOCIATION_CREATED_TIMEOUT: Final = 5 * 60
DB_CLUSTER_ROLE_ASSOCIATION_DELETED_TIMEOUT: Final = 5 * 60

DB_INSTANCE_DELAY: Final = 30
DB_INSTANCE_MIN_INTERVAL: Final = 10

ACTIVITY_STREAM_DELAY: Final = 5
ACTIVITY_STREAM_MIN_INTERVAL: Final = 3


# =============================================================================
# API error codes meaning "resource not found"
# =============================================================================

EVENT_SUBSCRIPTION_NOT_FOUND_CODES: Final = frozenset({"SubscriptionNotFound", "SubscriptionNotFoundFault"})
DB_PROXY_NOT_FOUND_CODES: Final = frozenset({"DBProxyNotFoundFault", "DBProxyEndpointNotFoundFault"})
DB_CLUSTER_NOT_FOUND_CODES: Final = frozenset({"DBClusterNotFoundFault"})
DB_INSTANCE_NOT_FOUND_CODES: Final = frozenset({"DBInstanceNotFound", "DBInstanceNotFoundFault"})

THROTTLING_CODES: Final = frozenset({"Throttling", "ThrottlingException", "RequestLimitExceeded"})
