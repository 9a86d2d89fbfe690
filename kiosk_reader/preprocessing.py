"""
Image manipulations applied to kiosk captures before OCR.

Kiosk screens render light text on a dark, noisy background. The default
chain converts to greyscale, inverts, upscales and thresholds so Tesseract
sees dark text on white.
"""

from typing import Iterable, List

import cv2
import numpy as np


class ImageManipulation:
    """A single preprocessing step."""

    def apply(self, image: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ConvertToGreyscale(ImageManipulation):
    """Drop colour channels."""

    def apply(self, image: np.ndarray) -> np.ndarray:
        if len(image.shape) == 2:
            return image.copy()
        if image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


class InvertColors(ImageManipulation):
    """Turn light-on-dark text into dark-on-light."""

    def apply(self, image: np.ndarray) -> np.ndarray:
        return cv2.bitwise_not(image)


class UpscaleTo4k(ImageManipulation):
    """Resize to a fixed width, keeping the aspect ratio."""

    def __init__(self, target_width: int = 3840):
        self.target_width = target_width

    def apply(self, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        if w == self.target_width:
            return image.copy()

        scale = self.target_width / w
        new_size = (self.target_width, max(1, int(round(h * scale))))
        interpolation = cv2.INTER_CUBIC if scale > 1 else cv2.INTER_AREA
        return cv2.resize(image, new_size, interpolation=interpolation)

    def __repr__(self) -> str:
        return f"UpscaleTo4k(target_width={self.target_width})"


class AdaptiveThreshold(ImageManipulation):
    """Binarize with a Gaussian adaptive threshold."""

    def __init__(self, block_size: int = 11, c: int = 2):
        if block_size < 3 or block_size % 2 == 0:
            raise ValueError(f"block_size must be an odd number >= 3, got {block_size}")
        self.block_size = block_size
        self.c = c

    def apply(self, image: np.ndarray) -> np.ndarray:
        if len(image.shape) == 3:
            image = ConvertToGreyscale().apply(image)

        return cv2.adaptiveThreshold(
            image, 255,
            cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY,
            blockSize=self.block_size,
            C=self.c
        )

    def __repr__(self) -> str:
        return f"AdaptiveThreshold(block_size={self.block_size}, c={self.c})"


def default_manipulations() -> List[ImageManipulation]:
    return [ConvertToGreyscale(), InvertColors(), UpscaleTo4k(), AdaptiveThreshold()]


def apply_manipulations(
    image: np.ndarray,
    manipulations: Iterable[ImageManipulation]
) -> np.ndarray:
    """Apply each manipulation in order and return the result."""
    if image is None or image.size == 0:
        raise ValueError("Cannot preprocess an empty image")

    for manipulation in manipulations:
        image = manipulation.apply(image)

    return image
