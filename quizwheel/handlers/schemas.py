from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from quizwheel.database.models import IDENTIFIER_MAX_LENGTH

# opaque key, stored exactly as sent
Identifier = Annotated[
    str,
    StringConstraints(strict=True, min_length=1, max_length=IDENTIFIER_MAX_LENGTH),
]
ShortText = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, max_length=100)]
LongText = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, max_length=200)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----------------------------
# wheel
# ----------------------------

class WheelRequest(CamelModel):
    user_identifier: Identifier


class WheelCheckResponse(CamelModel):
    can_spin: bool
    next_spin_date: Optional[str] = None  # ISO-8601 with offset
    total_spins: int = 0
    total_wins: int = 0


class WheelSpinResponse(CamelModel):
    has_won: bool
    can_spin: bool = False
    total_spins: int
    total_wins: int


class WheelStatsResponse(CamelModel):
    total_users: int
    total_spins: int
    total_wins: int
    win_rate: float


# ----------------------------
# quiz results
# ----------------------------

class ResultIn(CamelModel):
    score: Annotated[float, Field(ge=0, le=100, allow_inf_nan=False)]
    party: Optional[ShortText] = None
    associations: Optional[Annotated[list[LongText], Field(max_length=50)]] = None
    program: Optional[LongText] = None
    housing: Optional[LongText] = None

    @field_validator("score", mode="before")
    @classmethod
    def _score_is_number(cls, v: Any) -> Any:
        # no "42" strings, no booleans
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("score must be a number")
        return v


class ResultCreated(CamelModel):
    success: bool = True
    id: int
    message: str = "Result stored"


class BucketOut(CamelModel):
    bucket: str
    count: int


class PartyOut(CamelModel):
    party: str
    count: int


class RecentOut(CamelModel):
    score: float
    party: Optional[str] = None
    created_at: datetime


class ResultStatsResponse(CamelModel):
    total: int
    average: float
    distribution: list[BucketOut]
    parties: list[PartyOut]
    recent: list[RecentOut]


class ResultExportRow(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    score: float
    party: Optional[str] = None
    associations: list[str] = []
    program: Optional[str] = None
    housing: Optional[str] = None
    created_at: datetime
