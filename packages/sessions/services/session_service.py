"""Session identifiers that partition stored documents."""

import uuid
from typing import Mapping, Optional

from common.core.constants import DEFAULT_SESSION_ID, SESSION_HEADER
from common.core.telemetry import get_logger

logger = get_logger(__name__)


def generate_session_id() -> str:
    """Create a new opaque session identifier."""
    return str(uuid.uuid4())


def get_session_id_from_headers(headers: Optional[Mapping[str, str]]) -> str:
    """
    Read the session id a client sent, falling back to the shared default.

    Header names are matched case-insensitively.
    """
    if headers:
        for name, value in headers.items():
            if name.lower() == SESSION_HEADER and value and value.strip():
                return value.strip()
    return DEFAULT_SESSION_ID


def is_cleanup_eligible(session_id: Optional[str]) -> bool:
    """Whether a session may be bulk-deleted; the default session never is."""
    if not session_id or not session_id.strip():
        return False
    if session_id == DEFAULT_SESSION_ID:
        logger.warning("Refusing to clean up the default session")
        return False
    return True
