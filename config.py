# config.py - Configuration management for Framer Lead Relay

import logging
import os
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ Ignoring non-numeric {name}={raw!r}")
        return None


class AppConfig:
    """
    Centralized configuration management for the relay
    """

    # Downstream (Zoho Flow) Configuration
    ZFLOW_URL: str = os.getenv("ZFLOW_URL", "")
    ZFLOW_TIMEOUT_SECONDS: Optional[float] = _optional_float("ZFLOW_TIMEOUT_SECONDS")
    STRICT_DOWNSTREAM_STATUS: bool = os.getenv("STRICT_DOWNSTREAM_STATUS", "False").lower() == "true"

    # Security Configuration
    CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "")
    FRAMER_WEBHOOK_SECRET: str = os.getenv("FRAMER_WEBHOOK_SECRET", "")

    # Server Configuration
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Extra contact field aliases (optional JSON file)
    FIELD_ALIASES_PATH: str = os.getenv("FIELD_ALIASES_PATH", "data/field_aliases.json")

    @classmethod
    def validate_config(cls) -> bool:
        """
        Validate that required configuration is present
        """
        required_fields = [
            "ZFLOW_URL",
        ]

        missing_fields = [field for field in required_fields if not getattr(cls, field)]

        if missing_fields:
            logger.error(f"❌ Missing required configuration: {', '.join(missing_fields)}")
            return False

        return True

    @classmethod
    def get_cors_config(cls) -> List[str]:
        """Parsed CORS allow list (empty list means every origin is allowed)"""
        from api.security.cors_policy import parse_allow_list
        return parse_allow_list(cls.CORS_ORIGIN)

    @classmethod
    def get_security_config(cls) -> dict:
        """
        Get security-related configuration
        """
        return {
            "cors_allow_list": cls.get_cors_config(),
            "signature_secret_configured": bool(cls.FRAMER_WEBHOOK_SECRET),
            "environment": cls.ENVIRONMENT,
            "debug": cls.DEBUG
        }
