"""Service landing endpoint."""

from fastapi import APIRouter, Request

router = APIRouter(tags=["root"])

ENDPOINTS = {
    "POST /ussd": "Main USSD endpoint (for the gateway)",
    "GET /health": "Health check status",
    "GET /sessions": "View active sessions",
    "GET /farmers": "View registered farmers",
}


@router.get("/")
async def service_info(request: Request) -> dict:
    """Describe the service and the callback URL to configure on the gateway."""
    return {
        "service": "Farmer USSD Registration Service",
        "status": "running",
        "endpoints": ENDPOINTS,
        "ussd_callback_url": str(request.url_for("ussd_callback")),
    }
