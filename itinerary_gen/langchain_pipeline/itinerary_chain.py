import re
import json
import asyncio
import logging
from typing import Any, Dict, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from itinerary_gen.config import settings
from itinerary_gen.models.itinerary_models import TIME_SLOTS
from .itinerary_prompt import itinerary_prompt

logger = logging.getLogger(__name__)


class ItineraryGenerationError(RuntimeError):
    """The model call returned nothing usable as JSON."""


# ------------------------------------------------------------
# Helper: Extract clean JSON from model output
# ------------------------------------------------------------
def _extract_json_block(text: str) -> Dict[str, Any]:
    """
    Extract and parse the first JSON object in a text response.
    Tolerates Markdown fences or commentary around the object.
    """
    if not text or not text.strip():
        raise ItineraryGenerationError("No content received from model")

    match = re.search(r'\{[\s\S]*\}', text)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            pass

    raise ItineraryGenerationError(f"Invalid JSON response from model: {text[:200]}...")


# ------------------------------------------------------------
# Chat model factory (OpenAI, or Gemini Flash + Pro fallback)
# ------------------------------------------------------------
def build_chat_model() -> BaseChatModel:
    """
    Build the chat model for the configured provider.
    Provider-side retries are disabled; generate_itinerary_json owns retrying.
    """
    provider = settings.LLM_PROVIDER.strip().lower()

    if provider == "openai":
        return ChatOpenAI(
            model=settings.OPENAI_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            api_key=settings.OPENAI_API_KEY or None,
            max_retries=0,
        )

    if provider == "gemini":
        try:
            return ChatGoogleGenerativeAI(
                model=settings.GEMINI_MODEL,
                temperature=settings.LLM_TEMPERATURE,
                max_output_tokens=settings.LLM_MAX_TOKENS,
                google_api_key=settings.GOOGLE_API_KEY or None,
                max_retries=0,
            )
        except Exception as e:
            logger.warning("Gemini model %s unavailable: %s. Using %s.", settings.GEMINI_MODEL, e, settings.GEMINI_FALLBACK_MODEL)
            return ChatGoogleGenerativeAI(
                model=settings.GEMINI_FALLBACK_MODEL,
                temperature=settings.LLM_TEMPERATURE,
                max_output_tokens=settings.LLM_MAX_TOKENS,
                google_api_key=settings.GOOGLE_API_KEY or None,
                max_retries=0,
            )

    raise ValueError(f"Unsupported LLM_PROVIDER: {settings.LLM_PROVIDER!r}")


# ------------------------------------------------------------
# Main Generator Function (retry with exponential backoff)
# ------------------------------------------------------------
async def generate_itinerary_json(
    destination: str,
    duration_days: int,
    max_attempts: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Ask the model for a day-by-day itinerary and return the parsed JSON.

    Each attempt fails on a provider error, empty content or unparsable JSON.
    After failed attempt ``n`` the next one waits ``2 ** n`` seconds; the error
    of the last attempt propagates.
    """
    attempts = max_attempts or settings.LLM_MAX_ATTEMPTS
    if attempts < 1:
        raise ItineraryGenerationError(f"LLM_MAX_ATTEMPTS must be at least 1, got {attempts}")
    chain = itinerary_prompt | build_chat_model() | StrOutputParser()

    input_data = {
        "destination": destination,
        "duration_days": duration_days,
        "time_slots": ", ".join(TIME_SLOTS),
    }

    for attempt in range(1, attempts + 1):
        try:
            result = await chain.ainvoke(input_data)
            return _extract_json_block(result)
        except Exception as e:
            logger.warning("Attempt %d/%d failed: %s", attempt, attempts, e)
            if attempt == attempts:
                raise

            await _backoff(2 ** attempt)


async def _backoff(delay: float) -> None:
    logger.info("Retrying in %ss", delay)
    await asyncio.sleep(delay)
