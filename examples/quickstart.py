"""chaosmonkey quickstart — working demonstrations of the client.

Run this file directly to verify your installation:

    python examples/quickstart.py

The demos talk to an in-process fake Chaos Monkey server built on
``httpx.MockTransport``, so no network access is needed. Point
``ClientConfig.endpoint`` at a real server (or set CHAOSMONKEY_ENDPOINT)
to use the client for real.
"""

from __future__ import annotations

import json
import time
from datetime import UTC, datetime, timedelta

import httpx

from chaosmonkey import (
    STRATEGY_BURN_CPU,
    STRATEGY_SHUTDOWN_INSTANCE,
    APIError,
    ChaosMonkey,
    ClientConfig,
    NetworkError,
    Strategy,
)

# ---------------------------------------------------------------------------
# A tiny fake server
# ---------------------------------------------------------------------------

_EVENTS: list[dict[str, object]] = []


def _fake_chaos_monkey(request: httpx.Request) -> httpx.Response:
    if request.method == "POST":
        body = json.loads(request.content)
        if body["groupName"] == "missing-asg":
            return httpx.Response(
                400, json={"message": "Auto scaling group missing-asg does not exist"}
            )
        event = {
            "monkeyType": "CHAOS",
            "eventId": f"i-{len(_EVENTS):08x}",
            "eventType": body["eventType"],
            "eventTime": int(time.time() * 1000),
            "region": "us-east-1",
            "groupType": body["groupType"],
            "groupName": body["groupName"],
            "chaosType": body.get("chaosType", ""),
        }
        _EVENTS.append(event)
        return httpx.Response(200, json=event)

    since = int(request.url.params.get("since", "0"))
    return httpx.Response(200, json=[e for e in _EVENTS if e["eventTime"] >= since])


def _client() -> ChaosMonkey:
    return ChaosMonkey(
        ClientConfig(
            endpoint="chaos.example.com:8080",
            http_client=httpx.Client(transport=httpx.MockTransport(_fake_chaos_monkey)),
        )
    )


# ---------------------------------------------------------------------------
# Demos
# ---------------------------------------------------------------------------


def demo_trigger_event() -> None:
    """Trigger events with built-in and custom strategies."""
    print("\n=== Demo 1: Trigger Events ===")
    client = _client()
    print(f"  endpoint resolved to {client.config.endpoint}")

    for strategy in (STRATEGY_SHUTDOWN_INSTANCE, STRATEGY_BURN_CPU, Strategy("MeltRack")):
        event = client.trigger_event("web-asg", strategy)
        print(f"  {event.strategy:<18} -> {event.instance_id} at {event.triggered_at}")
        assert event.auto_scaling_group_name == "web-asg"


def demo_list_events() -> None:
    """List the full history and a recent window."""
    print("\n=== Demo 2: List Events ===")
    client = _client()
    print(f"  all events:        {len(client.events())}")
    recent = client.events_since(datetime.now(tz=UTC) - timedelta(minutes=5))
    print(f"  last five minutes: {len(recent)}")


def demo_errors() -> None:
    """Show how server-side and network failures surface."""
    print("\n=== Demo 3: Errors ===")
    try:
        _client().trigger_event("missing-asg", STRATEGY_SHUTDOWN_INSTANCE)
    except APIError as exc:
        print(f"  APIError({exc.status_code}): {exc}")

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    offline = ChaosMonkey(
        ClientConfig(http_client=httpx.Client(transport=httpx.MockTransport(refuse)))
    )
    try:
        offline.events()
    except NetworkError as exc:
        print(f"  NetworkError: {exc}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run all quickstart demos in sequence."""
    print("chaosmonkey quickstart demos")
    print("=" * 45)

    demo_trigger_event()
    demo_list_events()
    demo_errors()

    print("\n" + "=" * 45)
    print("All demos completed successfully.")


if __name__ == "__main__":
    main()
