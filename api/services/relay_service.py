# api/services/relay_service.py

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config import AppConfig
from api.services.field_mapper import ContactFieldMapper, field_mapper
from api.services.payload_parser import parse_webhook_payload
from api.services.zflow_client import ForwardResult, ZohoFlowClient

logger = logging.getLogger(__name__)


class RelayConfigurationError(Exception):
    """The relay cannot forward because required configuration is missing"""


@dataclass
class RelayResult:
    outbound_payload: Dict[str, Any]
    forward: ForwardResult


class LeadRelayService:
    """
    parse -> normalize -> forward, for a single inbound submission.

    Stateless: configuration is read from AppConfig on every call and a
    fresh client is built per request.
    """

    def __init__(self, mapper: Optional[ContactFieldMapper] = None):
        self.mapper = mapper or field_mapper

    def _build_client(self) -> ZohoFlowClient:
        url = AppConfig.ZFLOW_URL
        if not url:
            raise RelayConfigurationError("ZFLOW_URL not set")
        return ZohoFlowClient(url, timeout=AppConfig.ZFLOW_TIMEOUT_SECONDS)

    def relay(self, payload: Dict[str, Any]) -> RelayResult:
        """Normalize an already-decoded payload and forward it downstream"""
        outbound = self.mapper.build_outbound_payload(payload)
        client = self._build_client()
        forward = client.forward(outbound)
        return RelayResult(outbound_payload=outbound, forward=forward)

    def relay_body(self, body: bytes) -> RelayResult:
        """Decode a raw request body, then relay it"""
        payload = parse_webhook_payload(body)
        return self.relay(payload)


# Global instance
relay_service = LeadRelayService()
