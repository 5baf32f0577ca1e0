"""Pydantic models for the Chaos Monkey REST API and the AWS facade."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

Strategy = NewType("Strategy", str)
"""Name of a chaos strategy.

Strategies are an open set: the server decides which ones it supports, so
any string is accepted and passed through untouched.
"""

STRATEGY_SHUTDOWN_INSTANCE = Strategy("ShutdownInstance")
STRATEGY_BLOCK_ALL_NETWORK_TRAFFIC = Strategy("BlockAllNetworkTraffic")
STRATEGY_DETACH_VOLUMES = Strategy("DetachVolumes")
STRATEGY_BURN_CPU = Strategy("BurnCpu")
STRATEGY_BURN_IO = Strategy("BurnIo")
STRATEGY_KILL_PROCESSES = Strategy("KillProcesses")
STRATEGY_NULL_ROUTE = Strategy("NullRoute")
STRATEGY_FAIL_EC2 = Strategy("FailEc2")
STRATEGY_FAIL_DNS = Strategy("FailDns")
STRATEGY_FAIL_DYNAMODB = Strategy("FailDynamoDb")
STRATEGY_FAIL_S3 = Strategy("FailS3")
STRATEGY_FILL_DISK = Strategy("FillDisk")
STRATEGY_NETWORK_CORRUPTION = Strategy("NetworkCorruption")
STRATEGY_NETWORK_LATENCY = Strategy("NetworkLatency")
STRATEGY_NETWORK_LOSS = Strategy("NetworkLoss")

# Strategies shipped with vanilla Chaos Monkey.
STRATEGIES: tuple[Strategy, ...] = (
    STRATEGY_SHUTDOWN_INSTANCE,
    STRATEGY_BLOCK_ALL_NETWORK_TRAFFIC,
    STRATEGY_DETACH_VOLUMES,
    STRATEGY_BURN_CPU,
    STRATEGY_BURN_IO,
    STRATEGY_KILL_PROCESSES,
    STRATEGY_NULL_ROUTE,
    STRATEGY_FAIL_EC2,
    STRATEGY_FAIL_DNS,
    STRATEGY_FAIL_DYNAMODB,
    STRATEGY_FAIL_S3,
    STRATEGY_FILL_DISK,
    STRATEGY_NETWORK_CORRUPTION,
    STRATEGY_NETWORK_LATENCY,
    STRATEGY_NETWORK_LOSS,
)

# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------

EVENT_TYPE_CHAOS_TERMINATION = "CHAOS_TERMINATION"
GROUP_TYPE_ASG = "ASG"

# eventTime bounds, in milliseconds, that datetime can represent.
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_SECOND = timedelta(seconds=1)
MIN_EVENT_TIME = (datetime.min.replace(tzinfo=UTC) - _EPOCH) // _SECOND * 1000
MAX_EVENT_TIME = (datetime.max.replace(tzinfo=UTC) - _EPOCH) // _SECOND * 1000 + 999


class APIRequest(BaseModel):
    """Body of a POST to the chaos endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    chaos_type: str = Field(default="", alias="chaosType")
    event_type: str = Field(alias="eventType")
    group_name: str = Field(alias="groupName")
    group_type: str = Field(alias="groupType")
    # Ignored by vanilla Chaos Monkey, honoured by some forks.
    region: str = Field(default="", alias="region")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON body, leaving out empty optional fields."""
        body = self.model_dump(by_alias=True)
        for key in ("chaosType", "region"):
            if not body[key]:
                del body[key]
        return body


class APIResponse(BaseModel):
    """A single event (or error) object returned by the API.

    Missing and null fields decode to their zero value and unknown fields
    are ignored, so an error body carrying only ``message`` still parses.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    chaos_type: str = Field(default="", alias="chaosType")
    event_id: str = Field(default="", alias="eventId")
    event_time: int = Field(
        default=0, ge=MIN_EVENT_TIME, le=MAX_EVENT_TIME, alias="eventTime"
    )
    event_type: str = Field(default="", alias="eventType")
    group_name: str = Field(default="", alias="groupName")
    group_type: str = Field(default="", alias="groupType")
    monkey_type: str = Field(default="", alias="monkeyType")
    region: str = Field(default="", alias="region")
    message: str = Field(default="", alias="message")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_zero(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


# ---------------------------------------------------------------------------
# Domain models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """The termination of an EC2 instance by Chaos Monkey."""

    model_config = ConfigDict(frozen=True)

    instance_id: str
    auto_scaling_group_name: str
    region: str = ""
    strategy: Strategy
    triggered_at: datetime


def to_event(resp: APIResponse) -> Event:
    """Convert an :class:`APIResponse` into an :class:`Event`.

    ``eventTime`` is milliseconds since the epoch; it is truncated to whole
    seconds and interpreted as UTC.
    """
    return Event(
        instance_id=resp.event_id,
        auto_scaling_group_name=resp.group_name,
        region=resp.region,
        strategy=Strategy(resp.chaos_type),
        triggered_at=datetime.fromtimestamp(resp.event_time // 1000, tz=UTC),
    )


class AutoScalingGroup(BaseModel):
    """Summary of an AWS auto scaling group."""

    model_config = ConfigDict(frozen=True)

    name: str
    instances_in_service: int = Field(default=0, ge=0)
    desired_capacity: int = 0
    min_size: int = 0
    max_size: int = 0


__all__ = [
    "EVENT_TYPE_CHAOS_TERMINATION",
    "GROUP_TYPE_ASG",
    "MAX_EVENT_TIME",
    "MIN_EVENT_TIME",
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
    "APIRequest",
    "APIResponse",
    "AutoScalingGroup",
    "Event",
    "Strategy",
    "to_event",
]
