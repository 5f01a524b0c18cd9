# ============================================================================
# FILE: barberbook/api/dependencies.py
# Shared dependencies: integration key checks and booking error mapping
# ============================================================================
import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status
from fastapi.responses import JSONResponse

from barberbook.config.settings import get_settings
from barberbook.schemas.booking import BookingError, BookingResult

logger = logging.getLogger(__name__)

BOOKING_ERROR_STATUS = {
    BookingError.SLOT_UNAVAILABLE: status.HTTP_409_CONFLICT,
    BookingError.PERSISTENCE_CONFLICT: status.HTTP_409_CONFLICT,
    BookingError.STAFF_NOT_BOOKABLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    BookingError.INVALID_SERVICE: status.HTTP_404_NOT_FOUND,
    BookingError.PAST_OR_OUT_OF_RANGE_DATE: status.HTTP_400_BAD_REQUEST,
}


def _check_key(expected: str, provided: Optional[str], scope: str) -> None:
    if not expected:
        return
    if not provided or not secrets.compare_digest(provided, expected):
        logger.warning(f"Rejected {scope} request with invalid API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )


async def verify_dashboard_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Staff dashboard integration key"""
    _check_key(get_settings().DASHBOARD_API_KEY, x_api_key, "dashboard")


async def verify_bot_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Conversational bot integration key"""
    _check_key(get_settings().BOT_API_KEY, x_api_key, "bot")


def booking_response(result: BookingResult) -> JSONResponse:
    """201 with the result on success, otherwise the status mapped from the error kind"""
    if result.success:
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=result.model_dump(mode="json"))
    return JSONResponse(
        status_code=BOOKING_ERROR_STATUS[result.error],
        content=result.model_dump(mode="json"),
    )
