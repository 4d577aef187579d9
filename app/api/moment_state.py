"""Founder moment state endpoint.

Fails open: any error past authentication and venture resolution returns the
safe BUILDING_MOMENTUM default with HTTP 200, so prompt pipelines composing
this call are never blocked by the classifier.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from app.core.auth_middleware import AuthContext
from app.core.logging import get_logger
from app.core.moment_engine import (
    VentureNotFoundError,
    build_safe_default_response,
    compute_founder_moment_state,
)
from app.core.rate_limiter import check_moment_rate_limit
from app.core.schemas_moment import VentureRequest

logger = get_logger(__name__)

router = APIRouter()


@router.post("/founder-moment-state")
async def get_founder_moment_state(
    body: VentureRequest,
    auth: AuthContext = Depends(check_moment_rate_limit),
) -> JSONResponse:
    """
    Classify the founder's current moment state for a venture.

    Args:
        body: ``{"ventureId": "..."}``

    Returns:
        state, signals, stateRationale, mavrikIntent, mavrikRole, mavrikRoleBlock
        (plus ``error`` when the safe default was substituted)

    Raises:
        HTTPException 400: If ventureId is missing
        HTTPException 401: If not authenticated
        HTTPException 404: If the venture does not belong to the user
        HTTPException 429: If rate limited
    """
    venture_id = (body.venture_id or "").strip()
    if not venture_id:
        raise HTTPException(status_code=400, detail="ventureId required")

    try:
        result = await compute_founder_moment_state(venture_id, auth.user_id)
    except VentureNotFoundError:
        raise HTTPException(status_code=404, detail="Venture not found")
    except Exception as e:
        logger.exception(f"Moment state classification failed for venture {venture_id}")
        return JSONResponse(content=build_safe_default_response(e), status_code=200)

    return JSONResponse(content=result.to_response(), status_code=200)
