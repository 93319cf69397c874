# -------------------------------------------------------------
# AI Itinerary Generator — FastAPI Entrypoint
# -------------------------------------------------------------
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

# Routers
from itinerary_gen.api.itinerary_router import router as itinerary_router

# Mongo init
from itinerary_gen.db.mongo import close_mongo, init_mongo

from itinerary_gen.config import settings
from itinerary_gen.schemas.itinerary_schema import ApiInfo


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


# -------------------------------------------------------------
# Initialize FastAPI App
# -------------------------------------------------------------
app = FastAPI(
    title="AI Itinerary Generator",
    description="Generates day-by-day travel itineraries with an LLM; poll jobs for results.",
    version="1.0.0",
)

# Register API routers
app.include_router(itinerary_router)


# -------------------------------------------------------------
# CORS: fixed headers on every response, OPTIONS answered directly
# -------------------------------------------------------------
@app.middleware("http")
async def cors_headers(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# -------------------------------------------------------------
# Error responses: always {"error": "..."}
# -------------------------------------------------------------
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


def _validation_message(errors) -> str:
    for err in errors:
        loc = err.get("loc", ())
        field = loc[1] if len(loc) > 1 else None

        if field is None or err.get("type") == "json_invalid":
            return "Request body must be a JSON object"
        if err.get("type") == "missing":
            return "Missing required fields: destination and durationDays"
        if field == "durationDays":
            return "durationDays must be a number between 1 and 30"
        if field == "destination":
            return "destination must be a non-empty string"
    return "; ".join(err.get("msg", "Invalid request") for err in errors) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return _error(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and wrong methods on known paths both read as "not found".
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED or (
        exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found"
    ):
        return _error(status.HTTP_404_NOT_FOUND, "Endpoint not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# -------------------------------------------------------------
# API description
# -------------------------------------------------------------
@app.get("/", response_model=ApiInfo)
def api_info():
    return ApiInfo(
        message="AI Itinerary Generator API",
        endpoints={
            "POST /generate": "Generate a new itinerary",
            "GET /status/{jobId}": "Check itinerary status",
        },
    )


# -------------------------------------------------------------
# Startup / Shutdown Hooks
# -------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("Starting up (environment: %s)", settings.ENV)
    try:
        await init_mongo()
    except Exception:
        # Requests still get a lazy client; store errors surface per request.
        logger.error("MongoDB unavailable at startup")


@app.on_event("shutdown")
async def on_shutdown():
    close_mongo()
