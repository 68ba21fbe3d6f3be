"""Health check endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy import text

from app.db.session import engine
from app.dependencies import get_services
from app.services.container import ServiceContainer

router = APIRouter()


async def check_database() -> dict[str, Any]:
    """Check database connectivity."""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "healthy", "message": "Database connection successful"}
    except Exception as e:
        return {"status": "unhealthy", "message": str(e)}


def check_sms_gateway(services: ServiceContainer) -> dict[str, Any]:
    """Report whether SMS credentials are configured. No request is sent."""
    if services.dispatcher.gateway.configured:
        return {"status": "healthy", "message": "SMS gateway configured"}
    return {"status": "degraded", "message": "SMS gateway not configured; notifications will fail"}


@router.get("", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy"}


@router.get("/detailed", status_code=status.HTTP_200_OK)
async def detailed_health_check(
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> dict[str, Any]:
    """Detailed health check with component status."""
    db_status = await check_database()
    sms_status = check_sms_gateway(services)

    return {
        "status": "healthy" if db_status["status"] == "healthy" else "unhealthy",
        "components": {
            "database": db_status,
            "sms_gateway": sms_status,
        },
    }
