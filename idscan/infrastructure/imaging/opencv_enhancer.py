"""
Adapter: OpenCV Image Enhancer.

Prepares a card image for recognition:
  1. Downscale  → longest side <= max_dimension, aspect kept
  2. Brightness / contrast → linear adjustment
  3. Sharpen    → 3x3 unsharp kernel
Result is re-encoded as JPEG.
"""

import cv2
import numpy as np

from idscan.core.interfaces.image_enhancer import IImageEnhancer


SHARPEN_KERNEL = np.array(
    [[0, -1, 0],
     [-1, 5, -1],
     [0, -1, 0]],
    dtype=np.float32,
)


class OpenCVImageEnhancer(IImageEnhancer):
    """
    Enhancer using plain OpenCV. Deterministic for a given input.
    """

    def __init__(
        self,
        max_dimension: int = 1000,
        brightness: int = 10,
        contrast: int = 20,
        sharpen: bool = True,
        jpeg_quality: int = 70,
    ):
        self._max_dimension = max_dimension
        self._brightness = brightness
        self._contrast = contrast
        self._sharpen = sharpen
        self._jpeg_quality = jpeg_quality

    def enhance(self, image_bytes: bytes) -> bytes:
        """Decode, enhance, re-encode."""
        img_array = np.frombuffer(image_bytes, dtype=np.uint8)
        img = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None
        if img is None:
            raise ValueError("Could not decode image")

        img = self._resize(img)
        img = self._adjust_brightness_contrast(img)
        if self._sharpen:
            img = cv2.filter2D(img, -1, SHARPEN_KERNEL)

        ok, encoded = cv2.imencode(
            ".jpg", img, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality]
        )
        if not ok:
            raise ValueError("Could not encode enhanced image")
        return encoded.tobytes()

    def _resize(self, img: np.ndarray) -> np.ndarray:
        h, w = img.shape[:2]
        longest = max(h, w)
        if longest <= self._max_dimension:
            return img
        scale = self._max_dimension / longest
        size = (max(1, int(w * scale)), max(1, int(h * scale)))
        return cv2.resize(img, size, interpolation=cv2.INTER_AREA)

    def _adjust_brightness_contrast(self, img: np.ndarray) -> np.ndarray:
        """
        Brightness and contrast on a -100..100 scale.

        contrast maps to a gain around mid-gray, brightness to an offset.
        """
        gain = (100 + self._contrast) / 100
        offset = self._brightness + 128 * (1 - gain)
        return cv2.convertScaleAbs(img, alpha=gain, beta=offset)
