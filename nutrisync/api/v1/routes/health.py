from fastapi import APIRouter

from nutrisync.api.v1.schemas.health import HealthStatus

router = APIRouter()


@router.get("", response_model=HealthStatus, summary="Relay liveness check")
async def health_check() -> HealthStatus:
    """Report that the relay is up, with the server's current UTC time."""
    return HealthStatus()
