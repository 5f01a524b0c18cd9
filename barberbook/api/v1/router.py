"""
API v1 router setup
Organized into: public, dashboard (staff key) and bot (bot key) routes
"""
from fastapi import APIRouter, Depends

from barberbook.api.dependencies import verify_dashboard_key, verify_bot_key
from barberbook.api.v1.public import booking as public_booking
from barberbook.api.v1.dashboard import schedule, appointments as dashboard_appointments
from barberbook.api.v1.bot import appointments as bot_appointments

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    public_booking.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (Dashboard API key required)
# ============================================================================
api_v1_router.include_router(
    schedule.router,
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(verify_dashboard_key)]
)

api_v1_router.include_router(
    dashboard_appointments.router,
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(verify_dashboard_key)]
)

# ============================================================================
# BOT ROUTES (Bot API key required)
# ============================================================================
api_v1_router.include_router(
    bot_appointments.router,
    prefix="/bot",
    tags=["Bot"],
    dependencies=[Depends(verify_bot_key)]
)


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information, grouped by authentication type"""
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "X-API-Key header with the dashboard key",
            "bot": "X-API-Key header with the bot key",
        }
    }
