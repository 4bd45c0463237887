"""Response records and lifecycle states for the probe server.

The greeting payload is the only structured body the service produces. It is
built per request and discarded; the probe bodies are plain-text constants.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


GREETING_MESSAGE = "Hello, World!"
# The trailing space is part of the public payload.
SERVICE_NAME = "Hello node "

HEALTHY_BODY = "Healthy"
READY_BODY = "Ready"


class ServerPhase(str, Enum):
    """Lifecycle of the server process. There is no way back to STARTING."""

    STARTING = "starting"
    SERVING = "serving"


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format a moment as ISO-8601 UTC with millisecond precision and a `Z` suffix.

    Example:
        >>> utc_timestamp(datetime(2026, 10, 19, 8, 15, 30, 123456, tzinfo=timezone.utc))
        '2026-10-19T08:15:30.123Z'
    """
    moment = moment or datetime.now(timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class GreetingPayload(BaseModel):
    """Body of `GET /`.

    Immutable and strict: unknown fields are rejected. String fields are not
    whitespace-normalized because `service` carries a significant trailing space.

    Attributes:
        message: Constant greeting.
        service: Constant service label.
        pod: Pod identity from the configuration snapshot.
        time: Moment the payload was built, ISO-8601 UTC.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = GREETING_MESSAGE
    service: str = SERVICE_NAME
    pod: str
    time: str = Field(default_factory=utc_timestamp)

    @classmethod
    def for_pod(cls, pod: str) -> "GreetingPayload":
        """Build a fresh payload stamped with the current time."""
        return cls(pod=pod)
