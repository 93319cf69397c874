from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from typing import Dict, List

from itinerary_gen.models.itinerary_models import DayPlan


MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 30


# ============================================================
# 🎒 Generation Request (input schema)
# ============================================================
class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    destination: str = Field(..., min_length=1)
    duration_days: int = Field(
        ...,
        alias="durationDays",
        ge=MIN_DURATION_DAYS,
        le=MAX_DURATION_DAYS,
        strict=True,
    )

    # -------------------- Validators --------------------
    @field_validator("destination", mode="before")
    @classmethod
    def _norm_destination(cls, v):
        return v.strip() if isinstance(v, str) else v


# ============================================================
# 📨 Responses
# ============================================================
class GenerateAccepted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId")
    message: str = "Itinerary generation started"


class ApiInfo(BaseModel):
    message: str
    endpoints: Dict[str, str]


# ============================================================
# 🧳 Model Output (what the LLM must return)
# ============================================================
class GeneratedItinerary(BaseModel):
    """
    Shape of the JSON the model is asked for. Pass
    ``context={"duration_days": n}`` to ``model_validate`` to also check that
    exactly ``n`` days numbered 1..n come back in order.
    """

    itinerary: List[DayPlan]

    @model_validator(mode="after")
    def _check_days(self, info: ValidationInfo):
        expected = (info.context or {}).get("duration_days")
        if expected is None:
            return self

        if len(self.itinerary) != expected:
            raise ValueError(f"expected {expected} days, got {len(self.itinerary)}")

        numbers = [d.day for d in self.itinerary]
        if numbers != list(range(1, expected + 1)):
            raise ValueError(f"days must be numbered 1..{expected} in order, got {numbers}")
        return self
