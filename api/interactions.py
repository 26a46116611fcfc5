"""
Interactions API Router
Check a set of medications against the interaction rule table
"""

from fastapi import APIRouter

from api.schemas.label import (
    ConflictResponse,
    InteractionCheckRequest,
    InteractionCheckResponse,
)
from tools.interaction_checker import interaction_checker


router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.post("/check", response_model=InteractionCheckResponse)
async def check_interactions(request: InteractionCheckRequest):
    """
    Pairwise conflicts among the given medications

    Returns no conflicts (and rules_loaded=false) when the rule table is unavailable.
    """
    refs = [(m.name, m.ingredients) for m in request.medications]
    conflicts = interaction_checker.check_conflicts(refs)

    return InteractionCheckResponse(
        medications_checked=[m.name for m in request.medications],
        has_conflicts=bool(conflicts),
        conflicts=[
            ConflictResponse(
                med_a=c.med_a,
                med_b=c.med_b,
                kind="avoid" if c.is_avoid else "separate",
                separation_hours=None if c.is_avoid else c.separation_hours,
                explanation=c.explanation,
            )
            for c in conflicts
        ],
        rules_loaded=interaction_checker.rules_loaded,
    )
