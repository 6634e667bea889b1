"""
Intake adapter for the item attribute estimation model.

Given a photo or a product description, ask the model for dimensions,
shape and weight. When the model is unavailable or its answer is unusable
the adapter returns a local fallback estimate instead, so callers always
get a value.
"""

from __future__ import annotations

import logging
import os
import random
import time
from typing import Any, Callable, Literal, Optional, TypeVar

import certifi
import httpx
from openai import APIConnectionError, APIError, APITimeoutError, OpenAI
from pydantic import BaseModel, Field

from load_planner.models import Dimensions, Shape

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
BACKOFF_DELAYS = [1.0, 2.0]

Source = Literal["model", "fallback"]

TEXT_INSTRUCTION = """Estimate the physical shipping dimensions (length, width, height in cm) and weight (kg) of a commercial product.
Assume standard packaging if applicable (e.g. a TV comes in a box).
Classify its shape as 'box', 'cylinder', or 'irregular'.
Provide a confidence score from 0 to 1.
Return ONLY valid JSON matching the schema."""

IMAGE_INSTRUCTION = """Analyze this image of an item to be packed for shipping.
Estimate its physical dimensions (length, width, height) in centimeters.
Assume standard household context if no reference is present.
Classify its shape as 'box', 'cylinder', or 'irregular'.
Provide a confidence score from 0 to 1.
Return ONLY valid JSON matching the schema."""


# Structured output schemas for the model
class ModelImageEstimate(BaseModel):
    length: float = Field(gt=0, description="Length in cm")
    width: float = Field(gt=0, description="Width in cm")
    height: float = Field(gt=0, description="Height in cm")
    shape: Shape
    confidence: float = Field(ge=0, le=1)


class ModelTextEstimate(ModelImageEstimate):
    weight_kg: float = Field(gt=0, description="Weight in kg")


class ImageEstimate(BaseModel):
    dimensions: Dimensions
    shape: Shape
    confidence: float
    source: Source = "model"


class TextEstimate(BaseModel):
    dimensions: Dimensions
    weight_kg: float
    shape: Shape
    confidence: float
    source: Source = "model"


def fallback_text_estimate() -> TextEstimate:
    return TextEstimate(
        dimensions=Dimensions(length=50, width=40, height=15),
        weight_kg=5.5,
        shape="box",
        confidence=0.8,
        source="fallback",
    )


def fallback_image_estimate(rng: random.Random) -> ImageEstimate:
    """Random but bounded: length 10-39, width 10-29, height 5-24 cm."""
    return ImageEstimate(
        dimensions=Dimensions(
            length=rng.randint(10, 39),
            width=rng.randint(10, 29),
            height=rng.randint(5, 24),
        ),
        shape="box" if rng.random() > 0.5 else "irregular",
        confidence=0.85,
        source="fallback",
    )


SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ItemEstimator:
    """Estimate item attributes with the OpenAI Responses API, falling back locally."""

    def __init__(
        self,
        api_key: str | None = None,
        client: Any = None,
        rng: random.Random | None = None,
        model: str = DEFAULT_MODEL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY")
        self._client = client
        self.rng = rng or random.Random()
        self.model = model
        self._sleep = sleep

    @property
    def client(self) -> Any:
        if self._client is None and self.api_key:
            # httpx client for CA bundle and timeout
            http_client = httpx.Client(timeout=30.0, verify=certifi.where())
            self._client = OpenAI(api_key=self.api_key, http_client=http_client)
        return self._client

    def estimate_text(self, description: str) -> TextEstimate:
        if not description or not description.strip():
            raise ValueError("Product description must not be empty")

        parsed = self._ask(
            [
                {"role": "system", "content": TEXT_INSTRUCTION},
                {"role": "user", "content": f'Product: "{description}"'},
            ],
            ModelTextEstimate,
        )
        if parsed is None:
            return fallback_text_estimate()

        return TextEstimate(
            dimensions=Dimensions(length=parsed.length, width=parsed.width, height=parsed.height),
            weight_kg=parsed.weight_kg,
            shape=parsed.shape,
            confidence=parsed.confidence,
        )

    def estimate_image(self, image_b64: str, mime_type: str = "image/jpeg") -> ImageEstimate:
        if not image_b64:
            raise ValueError("Image payload must not be empty")

        parsed = self._ask(
            [
                {"role": "system", "content": IMAGE_INSTRUCTION},
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": f"data:{mime_type};base64,{image_b64}"},
                    ],
                },
            ],
            ModelImageEstimate,
        )
        if parsed is None:
            return fallback_image_estimate(self.rng)

        return ImageEstimate(
            dimensions=Dimensions(length=parsed.length, width=parsed.width, height=parsed.height),
            shape=parsed.shape,
            confidence=parsed.confidence,
        )

    def _ask(self, messages: list[dict[str, Any]], schema: type[SchemaT]) -> Optional[SchemaT]:
        """
        Call the model with structured outputs; None means use the fallback.

        Connection and timeout errors are retried twice with backoff.
        """
        client = self.client
        if client is None:
            logger.warning("OPENAI_API_KEY not set, using fallback estimate")
            return None

        last_error: Exception | None = None
        for attempt in range(len(BACKOFF_DELAYS) + 1):
            try:
                response = client.responses.parse(
                    model=self.model,
                    input=messages,
                    text_format=schema,
                    temperature=0.0,
                )
            except (APIConnectionError, APITimeoutError) as e:
                last_error = e
                if attempt < len(BACKOFF_DELAYS):
                    delay = BACKOFF_DELAYS[attempt]
                    logger.warning(
                        f"estimation connection/timeout error (attempt {attempt + 1}/{len(BACKOFF_DELAYS) + 1}), "
                        f"retrying after {delay}s"
                    )
                    self._sleep(delay)
                continue
            except (APIError, httpx.HTTPError, ValueError) as e:
                last_error = e
                break

            parsed = getattr(response, "output_parsed", None)
            if isinstance(parsed, schema):
                return parsed
            last_error = ValueError("model response has no output_parsed")
            break

        logger.warning(f"estimation failed, using fallback: {type(last_error).__name__}: {last_error}")
        return None
