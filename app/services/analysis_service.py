from __future__ import annotations

import json
import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError

from app.ai.prompt import build_analysis_messages
from app.ai.types import CompletionClient, CompletionError
from app.analytics.db import log_analysis_run
from app.core.analysis_config import get_analysis_value
from app.schemas.analysis import AnalysisResult
from app.services.fallback_analyzer import fallback_analyze

logger = logging.getLogger(__name__)


class EmptyResumeTextError(ValueError):
    """Raised when there is no resume text to analyze."""


@dataclass(frozen=True)
class PrimarySucceeded:
    result: AnalysisResult


@dataclass(frozen=True)
class PrimaryFailed:
    reason: str
    detail: str = ""


PrimaryOutcome = Union[PrimarySucceeded, PrimaryFailed]


def _is_score(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value <= 100


def _check_payload_shape(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return "response is not a JSON object"
    if not _is_score(payload.get("matchScore")):
        return "matchScore must be a number between 0 and 100"
    for key in ("matchedKeywords", "missingKeywords", "suggestions"):
        if not isinstance(payload.get(key), list):
            return f"{key} must be a list"
    return None


def _is_count(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_matched(items: list[Any]) -> list[Any]:
    """Drop case-insensitive repeats (first wins), then order by count, highest first."""
    seen: set[str] = set()
    unique: list[Any] = []
    for item in items:
        if isinstance(item, dict):
            key = str(item.get("keyword") or "").strip().lower()
            if key and key in seen:
                continue
            seen.add(key)
        unique.append(item)
    # malformed entries are left for schema validation to reject
    if all(isinstance(item, dict) and _is_count(item.get("count")) for item in unique):
        unique = sorted(unique, key=lambda item: item["count"], reverse=True)
    return unique


def _coerce_payload(payload: dict[str, Any], resume_text: str) -> dict[str, Any]:
    coerced = dict(payload)
    coerced["matchScore"] = int(round(float(payload["matchScore"])))
    coerced["matchedKeywords"] = _normalize_matched(payload["matchedKeywords"])
    suggestions: list[Any] = []
    for index, item in enumerate(payload["suggestions"]):
        if isinstance(item, dict) and not str(item.get("id") or "").strip():
            item = {**item, "id": f"ai_{index}"}
        suggestions.append(item)
    coerced["suggestions"] = suggestions
    coerced["resumeText"] = resume_text
    return coerced


class ResumeAnalyzer:
    """Scores a resume against a job description.

    The language-model client is tried first; any failure there (including a
    disabled client) silently falls back to the deterministic analyzer. The
    only error surfaced to callers is ``EmptyResumeTextError``.
    """

    def __init__(
        self,
        client: CompletionClient | None,
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._client = client
        self._temperature = (
            temperature if temperature is not None else float(get_analysis_value("primary.temperature", 0.3))
        )
        self._max_output_tokens = (
            max_output_tokens
            if max_output_tokens is not None
            else int(get_analysis_value("primary.max_output_tokens", 2000))
        )
        self._rng = rng

    @property
    def model(self) -> str:
        if self._client is None:
            return "deterministic"
        return getattr(self._client, "model", "unknown")

    def analyze(self, resume_text: str, job_description: str, *, operation: str = "analyze") -> AnalysisResult:
        if not resume_text or not resume_text.strip():
            raise EmptyResumeTextError("Resume text is empty")

        run_id = uuid.uuid4().hex
        started = time.perf_counter()
        outcome = self.run_primary(resume_text, job_description)

        if isinstance(outcome, PrimarySucceeded):
            result = outcome.result
            status = "success"
            reason = None
            logger.info(
                "resume_analysis_completed run_id=%s operation=%s model=%s score=%s suggestions=%s",
                run_id,
                operation,
                self.model,
                result.match_score,
                len(result.suggestions),
            )
        else:
            status = "fallback"
            reason = outcome.reason
            logger.warning(
                "resume_analysis_fallback run_id=%s operation=%s model=%s reason=%s detail=%s",
                run_id,
                operation,
                self.model,
                outcome.reason,
                outcome.detail,
            )
            result = fallback_analyze(resume_text, job_description, rng=self._rng)

        self._record_run(
            run_id=run_id,
            operation=operation,
            status=status,
            reason=reason,
            match_score=result.match_score,
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        return result

    def run_primary(self, resume_text: str, job_description: str) -> PrimaryOutcome:
        if self._client is None:
            return PrimaryFailed("llm_disabled")

        messages = build_analysis_messages(resume_text, job_description)
        try:
            content = self._client.complete(
                messages,
                temperature=self._temperature,
                max_output_tokens=self._max_output_tokens,
            )
        except CompletionError as exc:
            return PrimaryFailed(exc.code, str(exc))
        except Exception as exc:  # noqa: BLE001
            return PrimaryFailed("llm_exception", f"{type(exc).__name__}: {exc}")

        if not content or not content.strip():
            return PrimaryFailed("empty_response")

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            return PrimaryFailed("invalid_json", str(exc))

        shape_error = _check_payload_shape(payload)
        if shape_error:
            return PrimaryFailed("invalid_schema", shape_error)

        try:
            result = AnalysisResult.model_validate(_coerce_payload(payload, resume_text))
        except ValidationError as exc:
            return PrimaryFailed("invalid_schema", f"{exc.error_count()} validation errors")

        return PrimarySucceeded(result)

    def _record_run(
        self,
        *,
        run_id: str,
        operation: str,
        status: str,
        reason: str | None,
        match_score: int,
        latency_ms: int,
    ) -> None:
        try:
            log_analysis_run(
                run_id=run_id,
                operation=operation,
                model=self.model,
                status=status,
                fallback_reason=reason,
                match_score=match_score,
                latency_ms=latency_ms,
            )
        except Exception:  # pragma: no cover
            logger.debug("analysis_run_logging_failed", exc_info=True)
