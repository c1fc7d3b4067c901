"""
Base64 Converter API Application

This package implements a FastAPI application for moving images and files
through manual copy/paste as Base64 data URIs:
- Image resize/recompression before encoding (JPEG)
- Data URI encoding and fixed-size fragmenting
- Validation and reassembly of pasted fragments
- Saving decoded content to the gallery or as files

Features include:
- Size estimates and reduction percentages
- Quality metrics (PSNR, SSIM) for recompressed images
- Sessions that re-encode when settings change
"""
from b64converter.config import TEMP_DIR

# Export the app instance
from b64converter.api import app

__all__ = ['app', 'TEMP_DIR']
