# -------------------------------------------------------------
# 🗂️ Job Store: itinerary job documents in MongoDB
# -------------------------------------------------------------
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection

from itinerary_gen.config import settings
from itinerary_gen.db.mongo import get_collection
from itinerary_gen.models.itinerary_models import DayPlan, Job, JobStatus
import logging

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class JobStore:
    """
    Key-to-document map over the itineraries collection.

    Every pipeline write is filtered on ``status == "processing"`` so a job that
    has reached a terminal state is never modified again.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def create(self, job_id: str, destination: str, duration_days: int) -> Job:
        job = Job(
            status=JobStatus.PROCESSING,
            destination=destination,
            duration_days=duration_days,
            created_at=_now(),
        )
        doc = job.model_dump(by_alias=True, exclude={"updated_at"})
        await self.collection.insert_one({"_id": job_id, **doc})
        return job

    async def get(self, job_id: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": job_id}, {"_id": 0})

    async def mark_processing(self, job_id: str) -> bool:
        return await self._update_open_job(job_id, {
            "status": JobStatus.PROCESSING.value,
            "updatedAt": _now(),
        })

    async def complete(self, job_id: str, days: List[DayPlan]) -> bool:
        now = _now()
        return await self._update_open_job(job_id, {
            "status": JobStatus.COMPLETED.value,
            "itinerary": [d.model_dump() for d in days],
            "completedAt": now,
            "updatedAt": now,
            "error": None,
        })

    async def fail(self, job_id: str, message: str) -> bool:
        now = _now()
        return await self._update_open_job(job_id, {
            "status": JobStatus.FAILED.value,
            "completedAt": now,
            "updatedAt": now,
            "error": message,
        })

    async def _update_open_job(self, job_id: str, fields: Dict[str, Any]) -> bool:
        result = await self.collection.update_one(
            {"_id": job_id, "status": JobStatus.PROCESSING.value},
            {"$set": fields},
        )
        if result.matched_count == 0:
            logger.warning("Job %s is missing or already terminal; skipped update to %s", job_id, fields["status"])
            return False
        return True


def get_job_store() -> JobStore:
    """FastAPI dependency: store bound to the process-wide Mongo client."""
    return JobStore(get_collection(settings.COLL_ITINERARIES))
