from datetime import datetime

from pydantic import BaseModel, Field

from nutrisync.utils.time import utcnow


class HealthStatus(BaseModel):
    """Liveness payload for the relay server."""

    status: str = "ok"
    timestamp: datetime = Field(default_factory=utcnow)
