from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


ACTIVITIES_PER_DAY = 3
TIME_SLOTS = ("Morning", "Afternoon", "Evening")


# ------------------------------------------------------------
#  Job Status
# ------------------------------------------------------------
class JobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# ------------------------------------------------------------
#  Itinerary Components
# ------------------------------------------------------------
class Activity(BaseModel):
    time: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)

    @field_validator("time", "description", "location", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class DayPlan(BaseModel):
    day: int = Field(..., ge=1)
    theme: str = Field(..., min_length=1)
    activities: List[Activity] = Field(..., min_length=ACTIVITIES_PER_DAY, max_length=ACTIVITIES_PER_DAY)

    @field_validator("theme", mode="before")
    @classmethod
    def _strip_theme(cls, v):
        return v.strip() if isinstance(v, str) else v


# ------------------------------------------------------------
#  Job Record (one Mongo document per job)
# ------------------------------------------------------------
class Job(BaseModel):
    """
    Persisted itinerary job. Field aliases are the camelCase keys used both in
    the Mongo document and in API responses.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    status: JobStatus
    destination: str
    duration_days: int = Field(..., alias="durationDays")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")
    itinerary: List[DayPlan] = Field(default_factory=list)
    error: Optional[str] = None
