# Framer Lead Relay - Main Application Entry Point

# Load environment variables FIRST (before any other imports that use config)
from dotenv import load_dotenv
load_dotenv()  # This loads the .env file

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from config import AppConfig
from api.routes.webhook_routes import (
    router as webhook_router,
    PIXEL_PATHS,
    SERVICE_NAME,
    SERVICE_VERSION,
)
from api.security.middleware import RelayCORSMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, AppConfig.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events"""
    # Startup
    logger.info(f"🚀 {SERVICE_NAME} starting up...")

    allow_list = AppConfig.get_cors_config()
    logger.info("🔧 Configuration Status:")
    logger.info(f"   🎯 ZFLOW_URL: {'✅ Loaded' if AppConfig.ZFLOW_URL else '❌ Missing'}")
    logger.info(f"   🌐 CORS_ORIGIN: {', '.join(allow_list) if allow_list else 'any origin'}")
    logger.info(f"   🔐 FRAMER_WEBHOOK_SECRET: {'✅ Loaded' if AppConfig.FRAMER_WEBHOOK_SECRET else '➖ Not set'} (not enforced)")
    logger.info(f"   ⏱️ ZFLOW_TIMEOUT_SECONDS: {AppConfig.ZFLOW_TIMEOUT_SECONDS or 'none'}")

    if AppConfig.validate_config():
        logger.info("✅ All required configuration loaded successfully")
    else:
        logger.error("❌ Configuration validation failed - submissions will be answered with 500")

    logger.info("🎯 Ready to relay form submissions!")

    yield

    # Shutdown
    logger.info(f"🛑 {SERVICE_NAME} shutting down...")


# Create FastAPI app with lifespan
app = FastAPI(
    title=SERVICE_NAME,
    description="Normalizes Framer form submissions and forwards them to Zoho Flow",
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RelayCORSMiddleware, pixel_paths=PIXEL_PATHS)

app.include_router(webhook_router)


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        error = "Method not allowed"
    elif exc.status_code == 404:
        error = "Not found"
    else:
        error = str(exc.detail)
    logger.info(f"📄 {exc.status_code} for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": error},
        headers=exc.headers,
    )


if __name__ == "__main__":
    import uvicorn

    try:
        uvicorn.run(app, host=AppConfig.HOST, port=AppConfig.PORT)
    except KeyboardInterrupt:
        logger.info(f"🛑 {SERVICE_NAME} shutting down...")
    except Exception as e:
        logger.error(f"❌ Application crashed: {e}")
        raise
