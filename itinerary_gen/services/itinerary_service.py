import time
import random
import string
import logging
from typing import List

from pydantic import ValidationError

from itinerary_gen.db.job_store import JobStore
from itinerary_gen.langchain_pipeline.itinerary_chain import generate_itinerary_json
from itinerary_gen.models.itinerary_models import DayPlan
from itinerary_gen.schemas.itinerary_schema import GeneratedItinerary

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class ItineraryValidationError(ValueError):
    """Model output parsed as JSON but does not match the day/activity shape."""


# ------------------------------------------------------------------
# 🆔 Job identifiers
# ------------------------------------------------------------------
def generate_job_id() -> str:
    """
    ``job_<epoch millis>_<9 base36 chars>``. Collision-resistant only; two
    jobs created in the same millisecond can in principle collide.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"job_{int(time.time() * 1000)}_{suffix}"


# ------------------------------------------------------------------
# ✅ Validation of model output
# ------------------------------------------------------------------
def validate_itinerary(payload: dict, duration_days: int) -> List[DayPlan]:
    try:
        parsed = GeneratedItinerary.model_validate(payload, context={"duration_days": duration_days})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'itinerary'}: {err['msg']}"
            for err in e.errors()
        )
        raise ItineraryValidationError(f"Itinerary failed validation: {problems}") from e
    return parsed.itinerary


# ------------------------------------------------------------------
# 🚀 Generation Pipeline (runs as a background task)
# ------------------------------------------------------------------
async def process_itinerary(job_id: str, destination: str, duration_days: int, store: JobStore) -> None:
    """
    Move a job from processing to completed or failed.

    Never raises: failures end up in the job's ``error`` field, or in the log
    if even the terminal write fails.
    """
    try:
        await store.mark_processing(job_id)

        payload = await generate_itinerary_json(destination, duration_days)
        days = validate_itinerary(payload, duration_days)

        await store.complete(job_id, days)
        logger.info("Itinerary completed for job %s", job_id)
    except Exception as e:
        logger.exception("Error processing itinerary for job %s", job_id)
        message = str(e) or type(e).__name__
        try:
            await store.fail(job_id, message)
        except Exception:
            logger.exception("Could not record failure for job %s", job_id)
