"""
Base64 Converter API Entry Point

This file serves as the main entry point for the application,
importing and running the FastAPI application defined in the b64converter package.

Run with uvicorn:
    uvicorn main:app --reload
"""
import logging
import sys

from b64converter import config

# Configure root logger
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format=config.LOG_FORMAT,
    stream=sys.stdout
)

# Set up logger
logger = logging.getLogger(__name__)

# Check that required dependencies are installed
try:
    import PIL
    import numpy
    import skimage
    import psutil
    logger.info("All required dependencies are available")
except ImportError as e:
    logger.critical(f"Missing required dependency: {str(e)}")
    logger.critical("Please install all dependencies: pip install -e .")
    sys.exit(1)

from b64converter import app

# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting Base64 Converter API on port {config.PORT} with {config.WORKERS} workers")
    logger.info(f"Generic files are saved to {config.OUTPUT_DIR}, images to {config.GALLERY_DIR}")

    uvicorn.run(
        "b64converter:app",
        host="0.0.0.0",
        port=config.PORT,
        workers=config.WORKERS,
        reload=config.DEBUG
    )
