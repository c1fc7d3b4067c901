"""
Runtime configuration for the Base64 converter service.

All values come from environment variables so the service can be configured
the same way locally, in containers and under uvicorn workers.
"""
import os
import tempfile

# Temporary directory owned by this process (removed on shutdown)
TEMP_DIR = tempfile.mkdtemp(prefix="b64converter_")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

PORT = int(os.environ.get("PORT", 8000))
WORKERS = int(os.environ.get("WORKERS", 1))
DEBUG = os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")

# Destinations for decoded content
OUTPUT_DIR = os.environ.get("B64_OUTPUT_DIR", os.path.join(TEMP_DIR, "files"))
GALLERY_DIR = os.environ.get("B64_GALLERY_DIR", os.path.join(TEMP_DIR, "gallery"))

# Compression defaults
DEFAULT_QUALITY = float(os.environ.get("B64_DEFAULT_QUALITY", 0.7))
DEFAULT_MAX_SIZE = int(os.environ.get("B64_DEFAULT_MAX_SIZE", 512))
DEFAULT_CHUNK_SIZE = int(os.environ.get("B64_DEFAULT_CHUNK_SIZE", 20000))

# Preset values offered by the client
QUALITY_PRESETS = (0.3, 0.5, 0.7, 0.9)
MAX_SIZE_PRESETS = (128, 256, 512, 1024)
CHUNK_SIZE_PRESETS = (10000, 20000, 30000, 50000)
