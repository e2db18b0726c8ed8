"""Route plotting endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Request, status

from ...errors import MissingAddressError, SessionBusyError
from ...schemas.routing import PlotRequest, PlotResponse
from ...services.geocoding.nominatim_client import NominatimClient
from ...services.outputs.formatter import route_result_to_json, summary_to_json
from ...services.planning.service import PlotOutcome, SessionRegistry, plot_route
from ...services.routing.osrm_client import OSRMClient

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


def _failure_status(outcome: PlotOutcome) -> int:
    if isinstance(outcome.error, MissingAddressError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(outcome.error, SessionBusyError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def _sessions(request: Request) -> SessionRegistry:
    registry = getattr(request.app.state, "sessions", None)
    if registry is None:
        registry = SessionRegistry()
        request.app.state.sessions = registry
    return registry


@router.post("/plot", response_model=PlotResponse, status_code=status.HTTP_200_OK)
async def plot(
    payload: PlotRequest,
    request: Request,
    x_session_id: str | None = Header(default=None),
) -> PlotResponse:
    session = _sessions(request).get(x_session_id or "default")
    geocoder = NominatimClient()
    osrm = OSRMClient()
    try:
        outcome = await plot_route(payload, session, geocoder=geocoder, router=osrm)
    except Exception as exc:
        logger.exception(f"Error plotting route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plot route: {str(exc)}",
        ) from exc
    finally:
        await geocoder.close()
        await osrm.close()

    if not outcome.success:
        raise HTTPException(status_code=_failure_status(outcome), detail=outcome.reason)

    return PlotResponse(
        **route_result_to_json(outcome.result),
        summary=summary_to_json(outcome.summary),
        overlays=outcome.overlays,
    )


@router.get("/current", response_model=PlotResponse, status_code=status.HTTP_200_OK)
def current(
    request: Request,
    x_session_id: str | None = Header(default=None),
) -> PlotResponse:
    """Return the route currently displayed for the session."""
    session = _sessions(request).get(x_session_id or "default")
    if session.result is None or session.summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No route is currently displayed.")
    return PlotResponse(
        **route_result_to_json(session.result),
        summary=summary_to_json(session.summary),
        overlays=session.overlays or {},
    )
