"""
Contract: Image Enhancer

Prepares a card image for recognition (resize, brightness,
contrast, sharpening). Any implementation (OpenCV, PIL, external
service) must respect this contract.
"""

from abc import ABC, abstractmethod


class IImageEnhancer(ABC):
    """
    Port: Image Enhancer

    Optional stage: the use case runs without one.
    """

    @abstractmethod
    def enhance(self, image_bytes: bytes) -> bytes:
        """
        Enhance an image.

        Args:
            image_bytes: Image in bytes (JPEG/PNG).

        Returns:
            Encoded enhanced image.

        Raises:
            ValueError: if the image cannot be decoded.
        """
        ...
