"""
API module for the image compression application.
"""
import logging
import platform
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from PIL import features

from imagepress import __version__
from imagepress.api.compress import router as compress_router
from imagepress.config import CONFIG
from imagepress.errors import ImagePressError
from imagepress.utils.metrics import get_cpu_mem

# Set up logging
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="ImagePress API",
    description="""
    API for compressing images:
    - JPEG, PNG and WebP input and output
    - Quality, target size and aspect ratio control
    - Single images returned as data URIs, batches as a ZIP archive
    """,
    version=__version__
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CONFIG.server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(compress_router, prefix="/api")


@app.exception_handler(ImagePressError)
async def compression_error_handler(request: Request, exc: ImagePressError):
    """Turn pipeline errors into {"error": message} responses."""
    logger.warning(f"{request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Image compression failed"}
    )


# Health check endpoints
@app.get("/health")
async def health_check():
    """Check if the API is running."""
    return {"status": "healthy", "version": __version__}


@app.get("/health/detailed")
async def detailed_health_check():
    """
    Provides detailed health information including system metrics and codec support.
    """
    cpu_mem = get_cpu_mem()
    system_info = {
        "cpu_usage": cpu_mem["cpu_usage"],
        "memory_usage": cpu_mem["memory_usage"],
        "python_version": platform.python_version(),
        "platform": platform.platform()
    }

    # Check that Pillow was built with every codec we encode to
    codec_status = {
        name: {"status": "ok" if features.check(feature) else "missing"}
        for name, feature in (("jpeg", "jpg"), ("png", "zlib"), ("webp", "webp"))
    }

    compression = CONFIG.compression
    return {
        "status": "healthy" if all(c["status"] == "ok" for c in codec_status.values()) else "degraded",
        "version": __version__,
        "system": system_info,
        "codecs": codec_status,
        "limits": {
            "allowed_types": list(compression.allowed_mime_types),
            "max_file_size": compression.max_file_size,
            "trust_declared_size": compression.trust_declared_size
        },
        "timestamp": time.time()
    }
