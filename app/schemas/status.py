from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InstanceStatus(str, Enum):
    ONLINE = "online"
    DEGRADED = "degraded"
    OFFLINE = "offline"


class OverallStatus(str, Enum):
    OPERATIONAL = "operational"
    DEGRADED = "degraded"


class CheckResult(BaseModel):
    """Outcome of one probe against one instance."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    status: InstanceStatus
    latency_ms: int | None = Field(None, alias="latency")
    status_code: int | None = Field(None, alias="statusCode")
    error_message: str | None = Field(None, alias="error")

    def to_payload(self) -> dict[str, Any]:
        # `latency` is always emitted, null when the probe got no response
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload.setdefault("latency", None)
        return {key: payload[key] for key in ("id", "name", "status", "latency", "statusCode", "error") if key in payload}


class StatusDocument(BaseModel):
    """Result of one aggregation pass, in registry order."""
    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(..., description="Aggregation completion time, ISO-8601")
    overall: OverallStatus
    instances: tuple[CheckResult, ...]

    def to_payload(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "overall": self.overall.value,
            "instances": [result.to_payload() for result in self.instances],
        }


class CachedStatus(BaseModel):
    """A serialized status response as kept in the cache."""
    model_config = ConfigDict(frozen=True)

    body: bytes
    headers: dict[str, str] = Field(default_factory=dict)
