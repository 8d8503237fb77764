import logging

from context_demo.core.errors import ConfigurationError
from context_demo.services.query_service import ContributionMode, QueryType

logger = logging.getLogger(__name__)


def require_api_key(api_key, support_email: str) -> str:
    key = (api_key or "").strip()
    if not key:
        raise ConfigurationError(
            "No usable api key given. Please run the demo command with\n"
            "\n"
            "  -apikey INSERT-YOUR-API-KEY-HERE\n"
            "\n"
            f"If you have not yet gotten an API key, get in touch with us at {support_email}"
        )
    return key


def normalize_api_server_url(url) -> str:
    raw = (url or "").strip()
    if not raw:
        raise ConfigurationError("No API server given")
    if "://" not in raw:
        raw = f"https://{raw}"
    return raw.rstrip("/")


def normalize_query_type(value) -> QueryType:
    try:
        return QueryType(value)
    except ValueError:
        logger.warning(f"Unknown query type {value}. Switching to {QueryType.FEED.value}.")
        return QueryType.FEED


def normalize_contribution_mode(value) -> ContributionMode:
    try:
        return ContributionMode(value)
    except ValueError:
        logger.warning(f"Unknown contribution mode {value}. Switching to {ContributionMode.NONE.value}.")
        return ContributionMode.NONE


def validate_poll_settings(pause_secs: int, batch_size: int, max_entities: int) -> None:
    if pause_secs < 0:
        raise ConfigurationError("Pause seconds must not be negative")
    if batch_size <= 0:
        raise ConfigurationError("Batch size must be positive")
    if max_entities < 0:
        raise ConfigurationError("Maximum number of entities must not be negative")
