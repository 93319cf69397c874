import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from itinerary_gen.db.job_store import JobStore, get_job_store
from itinerary_gen.models.itinerary_models import Job
from itinerary_gen.schemas.itinerary_schema import GenerateAccepted, GenerateRequest
from itinerary_gen.services.itinerary_service import generate_job_id, process_itinerary

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI Itinerary"])


@router.post("/generate", response_model=GenerateAccepted, status_code=status.HTTP_202_ACCEPTED)
async def generate_itinerary(
    request: GenerateRequest,
    background_tasks: BackgroundTasks,
    store: JobStore = Depends(get_job_store),
):
    """
    Start an itinerary job and return its id right away.
    Generation runs after the response, see process_itinerary.
    """
    job_id = generate_job_id()
    await store.create(job_id, request.destination, request.duration_days)

    background_tasks.add_task(process_itinerary, job_id, request.destination, request.duration_days, store)
    logger.info("Accepted job %s: %d days in %s", job_id, request.duration_days, request.destination)

    return GenerateAccepted(job_id=job_id)


@router.get("/status", include_in_schema=False)
@router.get("/status/", include_in_schema=False)
async def job_status_missing_id():
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job ID is required")


@router.get("/status/{job_id}", response_model=Job)
async def job_status(job_id: str, store: JobStore = Depends(get_job_store)):
    """Current job record, terminal or not."""
    try:
        doc = await store.get(job_id)
    except Exception:
        logger.exception("Failed to fetch job %s", job_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch job status")

    if doc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return doc
