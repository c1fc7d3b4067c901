"""
Utilities for measuring resource usage, timing and image quality loss.
"""
import math
import time
import logging
import numpy as np
import psutil
from PIL import Image
from typing import Tuple, Optional, Dict
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

# Set up logging
logger = logging.getLogger(__name__)

# Identical images have infinite PSNR; report this ceiling instead
PSNR_CEILING = 100.0


def get_cpu_mem() -> Dict[str, float]:
    """
    Get current CPU and memory usage.

    Returns:
        Dictionary with CPU and memory usage percentages
    """
    return {
        "cpu_usage": psutil.cpu_percent(interval=None),
        "memory_usage": psutil.virtual_memory().percent
    }


def calculate_image_metrics(
    original: Image.Image,
    processed: Image.Image
) -> Tuple[Optional[float], Optional[float]]:
    """
    Compare a processed (resized and/or recompressed) image with its source.

    The processed image is scaled back up to the original dimensions before
    comparison, so the figures include the detail lost by downscaling.

    Args:
        original: Source image
        processed: Image produced by the image processor

    Returns:
        Tuple of (PSNR, SSIM) rounded to 2 and 4 decimal places.
        Returns (None, None) if the metrics cannot be computed (for example
        when the image is smaller than the SSIM window).
    """
    try:
        original_arr = np.asarray(original.convert("RGB"))
        if processed.size != original.size:
            processed = processed.resize(original.size)
        processed_arr = np.asarray(processed.convert("RGB"))

        mse = np.mean(np.square(original_arr.astype(np.float32) - processed_arr.astype(np.float32)))
        if mse < 1e-10:
            psnr = PSNR_CEILING
        else:
            psnr = peak_signal_noise_ratio(original_arr, processed_arr, data_range=255)

        ssim = structural_similarity(original_arr, processed_arr, data_range=255, channel_axis=2)
    except Exception as e:
        logger.warning(f"Could not calculate image quality metrics: {str(e)}")
        return None, None

    if math.isnan(psnr) or math.isinf(psnr) or math.isnan(ssim):
        return None, None
    return round(float(psnr), 2), round(float(ssim), 4)


class PerformanceTimer:
    """
    Context manager for measuring execution time.

    Example:
        with PerformanceTimer() as timer:
            # Code to measure
        execution_time = timer.execution_time
    """

    def __init__(self):
        self.start_time = None
        self.execution_time = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.execution_time = time.perf_counter() - self.start_time
        return False  # Don't suppress exceptions
