"""
Nutrition estimation from free-text food descriptions.

The estimator renders a deterministic prompt, asks the text-generation
provider for a JSON object and validates it against NutritionEstimate.
Outcomes are returned as an EstimationResult instead of raised, so callers
decide whether a failure becomes an HTTP error, a retry prompt or a fallback.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional
import hashlib
import json
import logging
import re

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from adapters.llm_adapter import TextGenerationClient
from app.config import Settings, settings as default_settings
from app.exceptions import (
    MalformedResponseError,
    ServiceValidationError,
    UpstreamError,
)
from domain.models import utcnow
from domain.schemas.nutrition_schemas import NutritionEstimate
from repositories.nutrition_cache_repository import NutritionCacheRepository

logger = logging.getLogger("fitva.estimator")

SYSTEM_PROMPT = (
    "You are a nutrition expert. You estimate calories and macronutrients for "
    "foods described in plain language. Always answer with a single JSON object "
    "and nothing else."
)

ESTIMATION_PROMPT = """Estimate the nutrition facts for the food below.

Food: {description}
Quantity: {quantity}

Respond with a JSON object with exactly these keys:
- "calories": number, kcal
- "protein": number, grams
- "carbs": number, grams
- "fats": number, grams
- "fiber": number, grams, or null if unknown
- "sugar": number, grams, or null if unknown
- "sodium": number, milligrams, or null if unknown
- "confidence": one of "high", "medium", "low"
- "notes": short string with assumptions, or null

If no quantity is given assume one typical serving."""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_SPACE_RE = re.compile(r"\s+")


class EstimationStatus(str, Enum):
    OK = "ok"
    UPSTREAM = "upstream"
    MALFORMED = "malformed"


@dataclass
class EstimationResult:
    """Tagged outcome of one estimation: ok, upstream failure or schema failure"""

    status: EstimationStatus
    estimate: Optional[NutritionEstimate] = None
    error: Optional[str] = None
    raw_response: Optional[str] = None
    cached: bool = False
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.status == EstimationStatus.OK

    def unwrap(self) -> NutritionEstimate:
        """Return the estimate or raise the matching service error"""
        if self.status == EstimationStatus.OK:
            return self.estimate
        if self.status == EstimationStatus.UPSTREAM:
            raise UpstreamError(details={"reason": self.error})
        raise MalformedResponseError(details={"reason": self.error})


def normalize_text(value: Optional[str]) -> str:
    return _SPACE_RE.sub(" ", (value or "").strip()).lower()


def cache_key(description: str, quantity: Optional[str]) -> str:
    material = f"{normalize_text(description)}|{normalize_text(quantity)}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def build_estimation_prompt(description: str, quantity: Optional[str] = None) -> str:
    """Render the user prompt; identical inputs give identical prompts."""
    return ESTIMATION_PROMPT.format(
        description=description.strip(),
        quantity=(quantity or "").strip() or "not specified",
    )


def strip_code_fence(content: str) -> str:
    return _FENCE_RE.sub("", content.strip())


def parse_estimate(content: Optional[str]) -> NutritionEstimate:
    """
    Parse provider text into a NutritionEstimate.

    Raises:
        MalformedResponseError: Empty text, invalid JSON, a non-object, or a
            schema violation
    """
    if not content or not content.strip():
        raise MalformedResponseError(details={"reason": "empty response"})
    try:
        data = json.loads(strip_code_fence(content))
    except ValueError as exc:
        raise MalformedResponseError(details={"reason": f"invalid JSON: {exc}"}) from exc
    if not isinstance(data, dict):
        raise MalformedResponseError(details={"reason": "response is not a JSON object"})
    try:
        return NutritionEstimate.model_validate(data)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise MalformedResponseError(
            details={"reason": "schema validation failed", "fields": fields}
        ) from exc


class NutritionEstimator:
    """Estimate macros for a food description through the text-generation provider"""

    def __init__(
        self,
        client: TextGenerationClient,
        cache: Optional[NutritionCacheRepository] = None,
        config: Optional[Settings] = None,
    ):
        self.client = client
        self.config = config or default_settings
        self.cache = cache if self.config.nutrition_cache_enabled else None

    def estimate(self, description: str, quantity: Optional[str] = None) -> EstimationResult:
        """
        Estimate nutrition facts for one food description.

        Args:
            description: Non-empty free text, e.g. "two scrambled eggs on toast"
            quantity: Optional free-text amount, e.g. "250 g"

        Returns:
            EstimationResult tagged OK, UPSTREAM or MALFORMED

        Raises:
            ServiceValidationError: Blank description (no provider call is made)
        """
        if description is None or not description.strip():
            raise ServiceValidationError("Food description must not be empty")
        description = description.strip()
        quantity = quantity.strip() if quantity and quantity.strip() else None

        key = cache_key(description, quantity)
        cached = self._cache_lookup(key)
        if cached is not None:
            logger.info(f"estimate_cache_hit key={key[:12]}")
            return EstimationResult(
                status=EstimationStatus.OK,
                estimate=cached,
                raw_response=cached.model_dump_json(),
                cached=True,
            )

        prompt = build_estimation_prompt(description, quantity)
        max_attempts = 1 + self.config.estimation_malformed_retries
        result = EstimationResult(status=EstimationStatus.MALFORMED)

        for attempt in range(1, max_attempts + 1):
            try:
                content = self.client.complete_json(SYSTEM_PROMPT, prompt)
            except UpstreamError as exc:
                logger.warning(f"estimate_upstream_failed attempt={attempt} error={exc}")
                return EstimationResult(
                    status=EstimationStatus.UPSTREAM,
                    error=str((exc.details or {}).get("reason") or exc),
                    attempts=attempt,
                )

            try:
                estimate = parse_estimate(content)
            except MalformedResponseError as exc:
                logger.warning(
                    f"estimate_malformed attempt={attempt}/{max_attempts} "
                    f"reason={(exc.details or {}).get('reason')}"
                )
                result = EstimationResult(
                    status=EstimationStatus.MALFORMED,
                    error=str((exc.details or {}).get("reason") or exc),
                    raw_response=content,
                    attempts=attempt,
                )
                continue

            logger.info(
                f"estimate_ok calories={estimate.calories} "
                f"confidence={estimate.confidence.value} attempt={attempt}"
            )
            self._cache_store(key, description, quantity, estimate)
            return EstimationResult(
                status=EstimationStatus.OK,
                estimate=estimate,
                raw_response=content,
                attempts=attempt,
            )

        return result

    def _cache_lookup(self, key: str) -> Optional[NutritionEstimate]:
        if self.cache is None:
            return None
        not_before = utcnow() - timedelta(days=self.config.nutrition_cache_ttl_days)
        try:
            entry = self.cache.get_fresh(key, not_before)
            if entry is None:
                return None
            return NutritionEstimate.model_validate_json(entry.payload)
        except (SQLAlchemyError, ValidationError) as exc:
            # the cache is advisory; fall through to the provider
            logger.warning(f"estimate_cache_lookup_failed key={key[:12]} error={exc}")
            self.cache.db.rollback()
            return None

    def _cache_store(
        self, key: str, description: str, quantity: Optional[str], estimate: NutritionEstimate
    ) -> None:
        if self.cache is None:
            return
        try:
            self.cache.store(key, description, quantity, estimate.model_dump_json())
        except SQLAlchemyError as exc:
            logger.warning(f"estimate_cache_store_failed key={key[:12]} error={exc}")
            self.cache.db.rollback()
