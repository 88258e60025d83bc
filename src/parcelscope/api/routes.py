"""API routes for parcelscope."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from parcelscope.api.auth import require_bearer_token
from parcelscope.api.errors import error_response
from parcelscope.exceptions import InvalidTrackingNumberError
from parcelscope.models.scrape import ErrorResponse, HealthResponse, ScrapeRequest, ScrapeResponse
from parcelscope.tracking import scraper

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Missing or invalid trackingNumber."},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Authorization header missing."},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse, "description": "Authorization token rejected."},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Scrape failed or timed out."},
}


@router.get("/health", response_model=HealthResponse, tags=["system"])
def health() -> HealthResponse:
    return HealthResponse()


@router.post(
    "/api/scrape",
    response_model=ScrapeResponse,
    responses=_ERROR_RESPONSES,
    tags=["scrape"],
)
async def scrape(
    req: ScrapeRequest,
    _token: str = Depends(require_bearer_token),
) -> ScrapeResponse | JSONResponse:
    """Open the tracking page for ``trackingNumber`` and return the intercepted API payload."""
    if not req.tracking_number or not req.tracking_number.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, "trackingNumber is required in request body")

    tracking_number = req.tracking_number.strip()
    logger.info("Scraping tracking number: %s", tracking_number)

    try:
        data = await scraper.scrape_tracking(tracking_number, req.options)
    except InvalidTrackingNumberError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception as e:
        logger.exception("Error scraping %s", tracking_number)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "Internal server error")

    return ScrapeResponse(tracking_number=tracking_number, data=data)
