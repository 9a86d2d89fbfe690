"""
Location extraction.

The kiosk prints the player's location directly below a "Your inventories"
heading. The heading is used as a landmark: whatever fragment follows it in
reading order is taken as the raw location name and spell-checked against
the known locations.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Set, Union

import numpy as np
import yaml

from .config import DEFAULT_CONFIG, ExtractionConfig
from .exceptions import LocationNotFound, NoCloseMatch
from .matching import find_fragment_closest_to, spell_check
from .recognition import OCREngine
from .utils import LexicalResult

logger = logging.getLogger(__name__)


def extract_location(
    result: LexicalResult,
    known_locations: Set[str],
    config: ExtractionConfig = DEFAULT_CONFIG
) -> Optional[str]:
    """
    Find the current location in a full OCR result.

    Returns:
        The matching known location, or None when the raw text is too noisy
        to spell-check

    Raises:
        LocationNotFound: no fragments, no fragment after the anchor phrase,
            or no known locations to match against
    """
    fragments = result.fragments

    if not known_locations:
        raise LocationNotFound(fragments)

    try:
        anchor = find_fragment_closest_to(fragments, config.anchor_phrase)
    except NoCloseMatch:
        raise LocationNotFound(fragments)

    it = iter(fragments)
    for fragment in it:
        if fragment is not anchor:
            continue

        successor = next(it, None)
        if successor is None:
            raise LocationNotFound(fragments)

        raw_location = successor.text
        logger.debug("Read raw location '%s'", raw_location)

        try:
            return spell_check(raw_location, known_locations, config.max_distance)
        except NoCloseMatch:
            logger.warning("Could not spell-check location '%s'", raw_location)
            return None

    raise LocationNotFound(fragments)


# =============================================================================
# Location Repository
# =============================================================================

class LocationRepository:
    """Source of known location names."""

    def find_all_locations(self) -> Set[str]:
        raise NotImplementedError


class StaticLocationRepository(LocationRepository):
    """Fixed, in-memory set of locations."""

    def __init__(self, locations: Iterable[str] = ()):
        self._locations = frozenset(locations)

    def find_all_locations(self) -> Set[str]:
        return set(self._locations)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'StaticLocationRepository':
        """
        Load locations from YAML, either a plain list of names or a mapping
        with a ``locations`` list.
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or []

        if isinstance(data, dict):
            data = data.get("locations", [])
        if not isinstance(data, list):
            raise ValueError(f"Locations file {path} must contain a list of names")

        return cls(str(name) for name in data)


# =============================================================================
# Read Cycle
# =============================================================================

class CommodityLocationReader:
    """
    Reads the current location from kiosk screen captures.

    A fresh OCR engine is acquired from engine_factory for every read and
    closed when the read ends.
    """

    def __init__(
        self,
        engine_factory: Callable[[], OCREngine],
        location_repository: LocationRepository,
        config: ExtractionConfig = DEFAULT_CONFIG
    ):
        self.engine_factory = engine_factory
        self.location_repository = location_repository
        self.config = config

    def read(self, screen_capture: np.ndarray) -> Optional[str]:
        """
        Read the location from one capture.

        Any failure is logged and reported as None so that periodic reading
        continues.
        """
        try:
            logger.debug("Reading location...")
            with self.engine_factory() as engine:
                result = engine.read(screen_capture)

            location = extract_location(
                result,
                self.location_repository.find_all_locations(),
                self.config
            )
            logger.debug("Read location '%s'", location)

            return location
        except Exception:
            logger.exception("Could not read location")
            return None
