# api/services/payload_parser.py

import json
import logging
from typing import Any, Dict
from urllib.parse import parse_qsl

logger = logging.getLogger(__name__)


class PayloadParseError(ValueError):
    """Raised when a webhook body is neither a JSON object nor form data"""


def parse_webhook_payload(body: bytes) -> Dict[str, Any]:
    """
    Payload parser for Framer form webhooks.

    Framer sends JSON, but the same endpoint is also posted to from plain HTML
    forms, so anything that does not look like a JSON object is treated as
    application/x-www-form-urlencoded. Repeated form keys keep the last value.
    """
    try:
        body_str = (body or b"").decode("utf-8")
    except UnicodeDecodeError as e:
        raise PayloadParseError(f"Body is not valid UTF-8: {e}") from e

    if body_str.strip().startswith("{"):
        try:
            payload = json.loads(body_str)
        except json.JSONDecodeError as e:
            raise PayloadParseError(f"Invalid JSON body: {e}") from e
        if not isinstance(payload, dict):
            raise PayloadParseError("JSON body must be an object")
        logger.info(f"✅ Parsed JSON payload with {len(payload)} fields")
        return payload

    payload = dict(parse_qsl(body_str, keep_blank_values=True))
    logger.info(f"✅ Parsed form-encoded payload with {len(payload)} fields")
    logger.debug(f"🔄 Form-encoded fields: {list(payload.keys())}")
    return payload
