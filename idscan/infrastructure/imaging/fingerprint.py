"""
Image fingerprint: average hash used as the result cache key.

The image is scaled so its longest side is at most 32 px (never below
8 px per side), converted to grayscale, and each pixel becomes one bit:
1 when >= the mean gray level. Bits are packed into a hex string
prefixed with the scaled size.
"""

import hashlib
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)

HASH_SIDE = 32
MIN_SIDE = 8


def average_hash(image: np.ndarray) -> str:
    """Average hash of a decoded BGR or grayscale image."""
    h, w = image.shape[:2]
    scale = min(1.0, HASH_SIDE / max(w, h))
    scaled_w = max(MIN_SIDE, int(w * scale))
    scaled_h = max(MIN_SIDE, int(h * scale))

    small = cv2.resize(image, (scaled_w, scaled_h), interpolation=cv2.INTER_AREA)
    gray = cv2.cvtColor(small, cv2.COLOR_BGR2GRAY) if small.ndim == 3 else small

    bits = (gray >= gray.mean()).flatten()
    packed = np.packbits(bits).tobytes()
    return f"{scaled_w}x{scaled_h}:{packed.hex()}"


def image_fingerprint(image_bytes: bytes) -> str:
    """
    Fingerprint of an encoded image.

    Bytes that OpenCV cannot decode are keyed by a SHA-1 of the raw
    content instead, so identical payloads still share a cache entry.
    """
    img_array = np.frombuffer(image_bytes, dtype=np.uint8)
    img = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None

    if img is None:
        logger.debug("Undecodable image, fingerprinting raw bytes")
        return "raw:" + hashlib.sha1(image_bytes).hexdigest()

    return average_hash(img)
