from __future__ import annotations

import os
from typing import Optional

import openai
from openai import OpenAI

from app.ai.types import ChatMessage, CompletionError


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 20.0,
        max_retries: int = 2,
    ):
        self.model = model
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = OpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
            max_retries=max_retries,
        )

    def complete(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=temperature,
                response_format={"type": "json_object"},
                max_tokens=max_output_tokens,
            )
        except openai.APITimeoutError as exc:
            raise CompletionError(f"OpenAI request timed out: {exc}", code="timeout") from exc
        except openai.APIConnectionError as exc:
            raise CompletionError(f"OpenAI connection failed: {exc}", code="transport_error") from exc
        except openai.RateLimitError as exc:
            # insufficient_quota arrives as a 429 with its own error code
            code = getattr(exc, "code", None) or "rate_limited"
            raise CompletionError(f"OpenAI rate limited: {exc}", code=str(code)) from exc
        except openai.NotFoundError as exc:
            raise CompletionError(f"OpenAI model unavailable: {exc}", code="model_not_found") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise CompletionError(f"OpenAI credentials rejected: {exc}", code="auth_error") from exc
        except openai.APIError as exc:
            code = getattr(exc, "code", None) or "api_error"
            raise CompletionError(f"OpenAI API error: {exc}", code=str(code)) from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise CompletionError("No response content from OpenAI API", code="empty_response")
        return content
