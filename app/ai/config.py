from dataclasses import dataclass

from app.core.config import Settings, settings


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    api_key: str
    base_url: str | None
    timeout_s: float
    max_retries: int


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo", "dummy-key"}


def load_ai_config(source: Settings | None = None) -> AIConfig:
    cfg = source or settings
    api_key = (cfg.openai_api_key or "").strip()
    enabled = (
        cfg.resume_llm_enabled
        and cfg.ai_provider != "none"
        and bool(api_key)
        and not _looks_like_placeholder(api_key)
    )
    return AIConfig(
        enabled=enabled,
        provider=cfg.ai_provider,
        model=cfg.ai_model,
        api_key=api_key,
        base_url=cfg.openai_base_url,
        timeout_s=cfg.llm_timeout_s,
        max_retries=cfg.llm_max_retries,
    )
