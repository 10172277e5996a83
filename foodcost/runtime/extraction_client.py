"""Gemini client for the free-text ingredient extraction service.

The service is an untrusted producer: the response is only checked for shape
here. Defaulting and unit normalization happen when the triples are imported.
"""

import json
import time

import httpx
from google import genai
from google.genai import errors, types
from pydantic import BaseModel, Field

from foodcost.domain.ingredient import ParsedIngredient
from foodcost.runtime.logging import get_logger
from foodcost.runtime.settings import ExtractionSettings

logger = get_logger(__name__)

PROMPT_TEMPLATE = (
    "Analyze the following recipe text and extract a list of all ingredients, "
    "including their quantities and units of measurement. \n\nRecipe:\n{text}"
)


class ExtractedIngredient(BaseModel):
    """Shape the model is asked to produce for each ingredient."""

    name: str = Field(description="The name of the ingredient, e.g., 'all-purpose flour'.")
    quantity: float = Field(description="The quantity of the ingredient, e.g., 2.5.")
    unit: str = Field(description="The unit of measurement, e.g., 'cups', 'g', 'tsp', 'pc'.")


class ExtractionServiceUnavailable(RuntimeError):
    """Raised when the extraction service cannot be used or returns garbage."""


def build_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=list[ExtractedIngredient],
    )


def build_client(api_key: str, settings: ExtractionSettings) -> genai.Client:
    # HttpOptions.timeout is in milliseconds
    options: dict[str, object] = {"timeout": int(settings.timeout * 1000)}
    if settings.base_url:
        options["base_url"] = settings.base_url
    return genai.Client(api_key=api_key, http_options=types.HttpOptions(**options))


def parse_extraction_payload(text: str) -> list[ParsedIngredient]:
    """Decode the model's JSON array into ingredient triples."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionServiceUnavailable(f"Extraction service returned invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ExtractionServiceUnavailable("Extraction service did not return a list of ingredients")

    parsed: list[ParsedIngredient] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ExtractionServiceUnavailable("Extraction service returned a non-object ingredient")
        parsed.append(ParsedIngredient.from_payload(entry))
    return parsed


def extract_ingredients(
    text: str,
    settings: ExtractionSettings | None = None,
    client: genai.Client | None = None,
) -> list[ParsedIngredient]:
    """
    Send recipe text to the extraction service and return the parsed triples.

    The raw JSON text is decoded here rather than through ``response.parsed``
    so that partially filled ingredients still reach the importer's defaults.

    Raises:
        ValueError: If ``text`` is blank.
        ExtractionServiceUnavailable: Missing API key, transport or API error,
            an empty reply, or a malformed payload.
    """
    if not text or not text.strip():
        raise ValueError("Recipe text is empty")

    if settings is None:
        settings = ExtractionSettings()

    if client is None:
        api_key = settings.api_key()
        if api_key is None:
            raise ExtractionServiceUnavailable(f"API key is not configured (set {settings.api_key_env}).")
        client = build_client(api_key, settings)

    logger.info("Sending recipe text (%d chars) to %s...", len(text), settings.model)

    try:
        start_time = time.time()
        response = client.models.generate_content(
            model=settings.model,
            contents=PROMPT_TEMPLATE.format(text=text),
            config=build_config(),
        )
        elapsed_time = time.time() - start_time
        logger.info("Extraction service returned in %.2f seconds", elapsed_time)
    except errors.APIError as e:
        logger.error("Extraction service error: %s %s", e.code, e.message)
        raise ExtractionServiceUnavailable(f"Extraction service error: {e.code}") from e
    except httpx.HTTPError as e:
        logger.error("Failed to connect to extraction service: %s", e)
        raise ExtractionServiceUnavailable(f"Failed to connect to extraction service: {e}") from e

    if not response.text:
        logger.warning("Extraction service returned an empty response")
        raise ExtractionServiceUnavailable("Extraction service returned an empty response")

    parsed = parse_extraction_payload(response.text)
    logger.debug("Extraction service returned %d ingredients", len(parsed))
    return parsed
