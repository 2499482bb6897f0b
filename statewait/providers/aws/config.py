"""AWS connection configuration.

Immutable configuration dataclass shared by the AWS client factories.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AWS:
    """AWS connection configuration.

    Example:
        >>> from statewait.providers.aws import AWS
        >>> config = AWS(region="us-west-2")

    Args:
        region: AWS region of the resources. Default: us-east-1
        profile: Named profile from the shared credentials file. If None,
            uses the default credential chain.
        request_timeout: Connect and read timeout of each API call in
            seconds. Bounds how long a single probe can block.
        max_attempts: botocore's own retry attempts per API call.
    """

    region: str = "us-east-1"
    profile: str | None = None
    request_timeout: int = 30
    max_attempts: int = 3
