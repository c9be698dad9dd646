"""
Trigger router: called by the action handlers of other subsystems once
their own write has committed.

POST /triggers/{family}   family ∈ dare | checklist | invitation | combo | all

Always answers 202 with what the engine did. Evaluation failures are
log-only and never turn into an HTTP error for the caller.
"""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.errors import UnknownFamilyError
from app.db.base import get_db
from app.schemas.trigger import TriggerRequest, TriggerResponse, TriggerResultResponse
from app.services.dispatcher import TRIGGERS, check_all_badges

router = APIRouter(prefix="/triggers", tags=["triggers"])

ALL = "all"


@router.post(
    "/{family}",
    response_model=TriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Re-evaluate one badge family (or all) for a user and trip",
    responses={404: {"description": "Unknown family."}},
)
def trigger(family: str, payload: TriggerRequest, db: Session = Depends(get_db)):
    if family == ALL:
        results = check_all_badges(db, payload.user_id, payload.trip_id)
    elif family in TRIGGERS:
        results = [TRIGGERS[family](db, payload.user_id, payload.trip_id)]
    else:
        raise UnknownFamilyError(family, known=[*TRIGGERS, ALL])
    return TriggerResponse(results=[TriggerResultResponse(**asdict(r)) for r in results])
