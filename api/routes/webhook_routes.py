# api/routes/webhook_routes.py

import base64
import logging
import time
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from config import AppConfig
from api.security.cors_policy import parse_allow_list
from api.services.payload_parser import PayloadParseError
from api.services.relay_service import RelayConfigurationError, relay_service
from api.services.zflow_client import DownstreamError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Framer Webhooks"])

SERVICE_NAME = "Framer Lead Relay"
SERVICE_VERSION = "1.0.0"

RELAY_PATHS = ("/", "/api/framer-to-zoho-flow")
PIXEL_PATHS = ("/pixel", "/api/framer-to-zoho-flow/pixel")

# 1x1 transparent GIF
TRANSPARENT_GIF = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")


class RelayEnvelope(BaseModel):
    ok: bool
    error: Optional[str] = None
    detail: Optional[str] = None
    zohoStatus: Optional[int] = None
    zohoText: Optional[str] = None


def envelope_response(status_code: int, **fields) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=RelayEnvelope(**fields).model_dump(exclude_none=True),
    )


def pixel_response() -> Response:
    return Response(
        content=TRANSPARENT_GIF,
        media_type="image/gif",
        headers={"Cache-Control": "no-store, no-cache, must-revalidate"},
    )


@router.post(RELAY_PATHS[0])
@router.post(RELAY_PATHS[1])
async def relay_framer_submission(request: Request):
    """
    Relay a Framer form submission to Zoho Flow.

    Returns 200 with the downstream status and body whenever the downstream
    endpoint answered at all, 500 when the relay is not configured or the
    forward could not be completed.
    """
    start_time = time.time()
    body = await request.body()

    try:
        result = await run_in_threadpool(relay_service.relay_body, body)
    except RelayConfigurationError as e:
        logger.error(f"❌ Relay not configured: {e}")
        return envelope_response(500, ok=False, error=str(e))
    except (PayloadParseError, DownstreamError) as e:
        logger.error(f"❌ Relay failed: {e}")
        return envelope_response(500, ok=False, error="Relay failed", detail=str(e))
    except Exception as e:
        logger.error(f"💥 Unexpected relay error: {e}", exc_info=True)
        return envelope_response(500, ok=False, error="Relay failed", detail=str(e))

    forward = result.forward
    processing_time = time.time() - start_time
    logger.info(f"✅ Relayed submission in {processing_time:.2f}s - downstream status {forward.status_code}")

    if AppConfig.STRICT_DOWNSTREAM_STATUS and not forward.ok:
        return envelope_response(
            502,
            ok=False,
            error="Downstream rejected",
            zohoStatus=forward.status_code,
            zohoText=forward.text,
        )

    return envelope_response(200, ok=True, zohoStatus=forward.status_code, zohoText=forward.text)


@router.get(PIXEL_PATHS[0])
@router.get(PIXEL_PATHS[1])
@router.post(PIXEL_PATHS[0])
@router.post(PIXEL_PATHS[1])
async def relay_pixel_submission(request: Request):
    """
    Tracking-pixel variant: GET takes the lead from the query string, POST from
    the body. The caller always gets the transparent GIF; failures are only logged.
    """
    try:
        if request.method == "GET":
            payload = dict(request.query_params)
            result = await run_in_threadpool(relay_service.relay, payload)
        else:
            body = await request.body()
            result = await run_in_threadpool(relay_service.relay_body, body)
        logger.info(f"✅ Pixel submission relayed - downstream status {result.forward.status_code}")
    except RelayConfigurationError as e:
        logger.error(f"❌ Pixel relay not configured: {e}")
    except (PayloadParseError, DownstreamError) as e:
        logger.error(f"❌ Pixel relay failed: {e}")
    except Exception as e:
        logger.error(f"💥 Unexpected pixel relay error: {e}", exc_info=True)

    return pixel_response()


@router.get("/health")
async def relay_health_check():
    """Health check for the relay - reports configuration only, makes no downstream call"""
    zflow_configured = bool(AppConfig.ZFLOW_URL)
    return {
        "status": "healthy" if zflow_configured else "degraded",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": AppConfig.ENVIRONMENT,
        "zflow_configured": zflow_configured,
        "cors_allow_list": parse_allow_list(AppConfig.CORS_ORIGIN),
        "strict_downstream_status": AppConfig.STRICT_DOWNSTREAM_STATUS,
        "relay_paths": list(RELAY_PATHS),
        "pixel_paths": list(PIXEL_PATHS),
    }
