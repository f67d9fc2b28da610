"""
ImagePress API Entry Point

This file serves as the main entry point for the web application,
importing and running the FastAPI application defined in the imagepress package.

Run with uvicorn:
    uvicorn main:app --reload
"""
import logging
import sys

from imagepress.config import CONFIG

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure root logger
logging.basicConfig(
    level=getattr(logging, CONFIG.server.log_level, logging.INFO),
    format=LOG_FORMAT,
    stream=sys.stdout
)

# Set up logger
logger = logging.getLogger(__name__)

from imagepress import app  # noqa: E402
from PIL import features  # noqa: E402

# Check that Pillow can encode every output format
for codec in ("jpg", "zlib", "webp"):
    if features.check(codec):
        logger.info(f"Pillow codec {codec} is available")
    else:
        logger.warning(f"Pillow was built without {codec}; compression to that format will fail")

# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    server = CONFIG.server
    logger.info(f"Starting ImagePress API on port {server.port} with {server.workers} workers")

    uvicorn.run(
        "main:app",
        host=server.host,
        port=server.port,
        workers=server.workers,
        reload=server.debug,
        log_level=server.log_level.lower()
    )
