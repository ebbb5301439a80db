# api/services/zflow_client.py

import requests
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class DownstreamError(Exception):
    """The downstream webhook could not be reached (DNS, connection, timeout...)"""


@dataclass
class ForwardResult:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ZohoFlowClient:
    """Posts normalized leads to a Zoho Flow (or any JSON) webhook. One attempt, no retry."""

    def __init__(self, url: str, timeout: Optional[float] = None):
        if not url:
            raise ValueError("A downstream webhook URL must be provided")
        self.url = url
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}

    def forward(self, payload: Dict[str, Any]) -> ForwardResult:
        """Send the payload once; any HTTP status counts as a completed forward"""
        logger.info(f"📤 Forwarding lead to downstream webhook ({len(payload)} fields)")
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"❌ Downstream request failed: {e}")
            raise DownstreamError(str(e)) from e

        if 200 <= response.status_code < 300:
            logger.info(f"✅ Downstream accepted lead: {response.status_code}")
        else:
            logger.warning(f"⚠️ Downstream responded {response.status_code}: {response.text[:200]}")

        return ForwardResult(status_code=response.status_code, text=response.text)
