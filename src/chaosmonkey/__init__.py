"""chaosmonkey: client for the Chaos Monkey REST API."""

from chaosmonkey.config import ClientConfig, default_config, resolve_config
from chaosmonkey.core import (
    APIError,
    ChaosMonkey,
    ChaosMonkeyError,
    HTTPStatusError,
    MalformedResponseError,
    NetworkError,
)
from chaosmonkey.models import (
    STRATEGIES,
    STRATEGY_BLOCK_ALL_NETWORK_TRAFFIC,
    STRATEGY_BURN_CPU,
    STRATEGY_BURN_IO,
    STRATEGY_DETACH_VOLUMES,
    STRATEGY_FAIL_DNS,
    STRATEGY_FAIL_DYNAMODB,
    STRATEGY_FAIL_EC2,
    STRATEGY_FAIL_S3,
    STRATEGY_FILL_DISK,
    STRATEGY_KILL_PROCESSES,
    STRATEGY_NETWORK_CORRUPTION,
    STRATEGY_NETWORK_LATENCY,
    STRATEGY_NETWORK_LOSS,
    STRATEGY_NULL_ROUTE,
    STRATEGY_SHUTDOWN_INSTANCE,
    AutoScalingGroup,
    Event,
    Strategy,
)

__version__ = "0.1.0"

__all__ = [
    "STRATEGIES",
    "STRATEGY_BLOCK_ALL_NETWORK_TRAFFIC",
    "STRATEGY_BURN_CPU",
    "STRATEGY_BURN_IO",
    "STRATEGY_DETACH_VOLUMES",
    "STRATEGY_FAIL_DNS",
    "STRATEGY_FAIL_DYNAMODB",
    "STRATEGY_FAIL_EC2",
    "STRATEGY_FAIL_S3",
    "STRATEGY_FILL_DISK",
    "STRATEGY_KILL_PROCESSES",
    "STRATEGY_NETWORK_CORRUPTION",
    "STRATEGY_NETWORK_LATENCY",
    "STRATEGY_NETWORK_LOSS",
    "STRATEGY_NULL_ROUTE",
    "STRATEGY_SHUTDOWN_INSTANCE",
    "APIError",
    "AutoScalingGroup",
    "ChaosMonkey",
    "ChaosMonkeyError",
    "ClientConfig",
    "Event",
    "HTTPStatusError",
    "MalformedResponseError",
    "NetworkError",
    "Strategy",
    "default_config",
    "resolve_config",
]
