from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Optional
from logging_config import get_logger

logger = get_logger(__name__)

# Known payload kinds. The relay forwards any type; these are what the browser client sends.
MESSAGE_TYPE_SDP = "SDP"
MESSAGE_TYPE_CANDIDATE = "CANDIDATE"


class SignalEnvelope(BaseModel):
    """Wire envelope exchanged between peers through the relay.

    Only `code` is needed for routing. `message_type` and `content` are
    opaque to the relay and never rewritten.
    """
    model_config = ConfigDict(extra="allow")

    code: str = Field(min_length=1)
    message_type: Any = None
    content: Any = None


def parse_envelope(raw) -> Optional[SignalEnvelope]:
    """Parse a text frame into an envelope, or return None if it can't be routed."""
    if not isinstance(raw, (str, bytes)) or not raw:
        return None
    try:
        return SignalEnvelope.model_validate_json(raw)
    except ValidationError as e:
        logger.debug(f"Dropping unroutable frame: {e.error_count()} validation error(s)")
        return None
