"""API router for v1 endpoints."""

from fastapi import APIRouter

from app.api import commitment, moment_state

router = APIRouter()

# Founder moment state classifier
router.include_router(moment_state.router, tags=["moment_state"])

# Commitment window progress and stagnation
router.include_router(commitment.router, tags=["commitment"])
