import logging

from app.ai.config import AIConfig, load_ai_config
from app.ai.types import CompletionClient

from app.ai.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


def get_completion_client(cfg: AIConfig | None = None) -> CompletionClient | None:
    """Build the process-wide completion client, or None when the primary analyzer is off."""
    cfg = cfg or load_ai_config()

    if not cfg.enabled:
        logger.info("completion_client_disabled provider=%s", cfg.provider)
        return None

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
