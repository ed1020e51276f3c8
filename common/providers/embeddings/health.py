"""Reachability probe for the OpenAI-compatible model server."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel

from common.core.config import settings
from common.core.telemetry import get_logger
from common.providers.embeddings.endpoints import make_endpoint

logger = get_logger(__name__)


class ProviderState(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class ProviderStatus(BaseModel):
    status: ProviderState
    message: str
    model_count: int = 0
    timestamp: datetime


def _extract_models(data: Any) -> List[Any]:
    """Accept ``{"data": [...]}``, ``{"models": [...]}`` or a bare list."""
    if isinstance(data, dict):
        models = data.get("data", data.get("models"))
        return models if isinstance(models, list) else []
    if isinstance(data, list):
        return data
    return []


async def check_provider_status(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProviderStatus:
    """
    Probe ``GET {base}/models``.

    Online only when the server answers 2xx and lists at least one model.
    Never raises; every failure is reported as OFFLINE.
    """
    url = make_endpoint(base_url or settings.lm_base_url, "/models")
    now = datetime.now(timezone.utc)

    try:
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(
                url,
                headers={
                    "Authorization": f"Bearer {api_key or settings.lm_api_key}",
                    "Cache-Control": "no-cache",
                },
                timeout=timeout or settings.health_check_timeout_seconds,
            )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Model server connectivity check failed: {e}")
        return ProviderStatus(
            status=ProviderState.OFFLINE,
            message="Model server is not reachable",
            timestamp=now,
        )

    if response.is_error:
        return ProviderStatus(
            status=ProviderState.OFFLINE,
            message=f"Model server returned {response.status_code}",
            timestamp=now,
        )

    try:
        model_count = len(_extract_models(response.json()))
    except ValueError:
        model_count = 0

    if model_count > 0:
        return ProviderStatus(
            status=ProviderState.ONLINE,
            message="Model server reachable and models listed",
            model_count=model_count,
            timestamp=now,
        )

    return ProviderStatus(
        status=ProviderState.OFFLINE,
        message="Model server reachable but no models found",
        timestamp=now,
    )
