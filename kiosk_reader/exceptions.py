"""Exceptions raised by Kiosk Reader."""

from typing import Sequence

from .utils import Fragment


class KioskReaderError(Exception):
    """Base class for all Kiosk Reader errors."""


class NoCloseMatch(KioskReaderError):
    """No vocabulary entry is close enough to the candidate string."""

    def __init__(self, candidate: str, message: str = None):
        self.candidate = candidate
        super().__init__(message or f"No close match for '{candidate}'")


class LocationNotFound(KioskReaderError):
    """The location label could not be located in the OCR output."""

    def __init__(self, fragments: Sequence[Fragment]):
        self.fragments = tuple(fragments)
        texts = [fragment.text for fragment in self.fragments]
        super().__init__(f"Location not found in fragments {texts}")


class OCRError(KioskReaderError):
    """The OCR engine failed to read an image."""
