"""
Kiosk Reader: structured trading facts from trading-kiosk OCR output.

This package contains:
- utils: Lexical model (fragments, columns, results) and file I/O
- config: Tunable extraction constants
- matching: Fuzzy matching against closed vocabularies
- location: Current-location extraction and the location read cycle
- listing: Commodity listing extraction from row column pairs
- preprocessing: Image manipulations applied before OCR
- recognition: OCR engine adapters
"""

# Data classes
from .utils import (
    BoundingBox,
    Fragment,
    Column,
    LexicalResult,
)

# File I/O utilities
from .utils import (
    save_lexical_result,
    load_lexical_result,
    draw_annotations,
)

# Configuration
from .config import ExtractionConfig, DEFAULT_CONFIG, load_config

# Errors
from .exceptions import KioskReaderError, NoCloseMatch, LocationNotFound, OCRError

# Matching
from .matching import spell_check, find_fragment_closest_to

# Extraction
from .location import (
    extract_location,
    LocationRepository,
    StaticLocationRepository,
    CommodityLocationReader,
)
from .listing import (
    InventoryLevel,
    CommodityListing,
    extract_listing,
    extract_listings,
)

# OCR
from .preprocessing import (
    ImageManipulation,
    ConvertToGreyscale,
    InvertColors,
    UpscaleTo4k,
    AdaptiveThreshold,
    apply_manipulations,
)
from .recognition import OCREngine, TesseractOCR


__all__ = [
    # Data classes
    "BoundingBox",
    "Fragment",
    "Column",
    "LexicalResult",
    # File I/O
    "save_lexical_result",
    "load_lexical_result",
    "draw_annotations",
    # Configuration
    "ExtractionConfig",
    "DEFAULT_CONFIG",
    "load_config",
    # Errors
    "KioskReaderError",
    "NoCloseMatch",
    "LocationNotFound",
    "OCRError",
    # Matching
    "spell_check",
    "find_fragment_closest_to",
    # Extraction
    "extract_location",
    "LocationRepository",
    "StaticLocationRepository",
    "CommodityLocationReader",
    "InventoryLevel",
    "CommodityListing",
    "extract_listing",
    "extract_listings",
    # OCR
    "ImageManipulation",
    "ConvertToGreyscale",
    "InvertColors",
    "UpscaleTo4k",
    "AdaptiveThreshold",
    "apply_manipulations",
    "OCREngine",
    "TesseractOCR",
]
