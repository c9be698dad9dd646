from typing import Optional
from pydantic import BaseModel, Field


class TriggerRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    trip_id: str = Field(min_length=1, max_length=64)


class TriggerResultResponse(BaseModel):
    family: str
    user_id: str
    trip_id: str
    awarded: list[str]
    already_earned: list[str]
    skipped: list[str]
    failed: bool
    error: Optional[str] = None


class TriggerResponse(BaseModel):
    results: list[TriggerResultResponse]
