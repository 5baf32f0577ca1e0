"""Access to the AWS resources Chaos Monkey works with.

Credentials are picked up by boto3 from the usual places (environment
variables, shared config files, instance profiles).
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import boto3
import structlog
from botocore.config import Config

from chaosmonkey.core import ChaosMonkeyError
from chaosmonkey.models import AutoScalingGroup

logger = structlog.get_logger(__name__)

REQUEST_TIMEOUT_SECONDS = 10

LIFECYCLE_STATE_IN_SERVICE = "InService"


class DomainNotFoundError(ChaosMonkeyError, LookupError):
    """Raised when a SimpleDB domain to delete does not exist."""

    def __init__(self, domain_name: str) -> None:
        super().__init__(f"SimpleDB domain '{domain_name}' does not exist")
        self.domain_name = domain_name


def new_client(service: str, region: str) -> Any:
    """Create a boto3 client for *service* in *region* with a short timeout."""
    return boto3.client(
        service,
        region_name=region,
        config=Config(
            connect_timeout=REQUEST_TIMEOUT_SECONDS,
            read_timeout=REQUEST_TIMEOUT_SECONDS,
        ),
    )


def _paginate(client: Any, operation: str, key: str) -> Iterator[Any]:
    """Yield every item under *key* across all result pages of *operation*."""
    for page in client.get_paginator(operation).paginate():
        yield from page.get(key, [])


def auto_scaling_groups(region: str, client: Any = None) -> list[AutoScalingGroup]:
    """Return all auto scaling groups in *region*."""
    if client is None:
        client = new_client("autoscaling", region)
    logger.debug("listing_auto_scaling_groups", region=region)

    groups = []
    for g in _paginate(client, "describe_auto_scaling_groups", "AutoScalingGroups"):
        in_service = sum(
            1
            for i in g.get("Instances", [])
            if i.get("LifecycleState") == LIFECYCLE_STATE_IN_SERVICE
        )
        groups.append(
            AutoScalingGroup(
                name=g.get("AutoScalingGroupName", ""),
                instances_in_service=in_service,
                desired_capacity=g.get("DesiredCapacity", 0),
                min_size=g.get("MinSize", 0),
                max_size=g.get("MaxSize", 0),
            )
        )
    return groups


def delete_simpledb_domain(domain_name: str, region: str, client: Any = None) -> None:
    """Delete an existing SimpleDB domain.

    Raises:
        DomainNotFoundError: if no domain called *domain_name* exists. The
            delete call is not attempted in that case.
    """
    if client is None:
        client = new_client("sdb", region)

    if domain_name not in _paginate(client, "list_domains", "DomainNames"):
        raise DomainNotFoundError(domain_name)

    logger.debug("deleting_simpledb_domain", domain=domain_name, region=region)
    client.delete_domain(DomainName=domain_name)


__all__ = [
    "REQUEST_TIMEOUT_SECONDS",
    "DomainNotFoundError",
    "auto_scaling_groups",
    "delete_simpledb_domain",
    "new_client",
]
