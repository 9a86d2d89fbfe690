"""
Commodity listing extraction.

A kiosk row is read as two columns. The left column holds the commodity name
(possibly wrapped over several fragments) followed by an inventory marker
such as "Medium 85%". The right column holds two lines: the quantity in SCU,
then the unit price with an optional "k" magnitude suffix.

Each field is extracted on its own and degrades to None when the OCR text is
too damaged, so a partial listing is still returned.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import DEFAULT_CONFIG, ExtractionConfig
from .exceptions import NoCloseMatch
from .matching import spell_check
from .utils import Column

logger = logging.getLogger(__name__)


# Quantity on the first line, price on the character after the line break.
# The single "." before the price swallows the currency glyph.
RIGHT_PATTERN = re.compile(
    r"\D*([0-9,]+).+(?:\r\n|\n|\r).((\d+[.,])?\d+[k ]*)",
    re.IGNORECASE
)


class InventoryLevel(Enum):
    """Stock levels as displayed by the kiosk."""
    OUT_OF_STOCK = "Out of stock"
    VERY_LOW = "Very low"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very high"
    MAX = "Max"

    @property
    def display(self) -> str:
        return self.value


INVENTORY_LEVELS_BY_DISPLAY: Dict[str, InventoryLevel] = {
    level.display: level for level in InventoryLevel
}


# =============================================================================
# Field Extraction
# =============================================================================

def extract_commodity(left: Column) -> Optional[str]:
    """Join every fragment but the last, which holds the inventory marker."""
    if not left.fragments:
        logger.debug("Could not extract commodity from empty column")
        return None

    return " ".join(fragment.text for fragment in left.fragments[:-1])


def extract_inventory_level(
    left: Column,
    config: ExtractionConfig = DEFAULT_CONFIG
) -> Optional[InventoryLevel]:
    """Read "<level> <percentage>" from the last fragment of the left column."""
    if not left.fragments:
        logger.debug("Could not extract inventory level from empty column")
        return None

    raw = left.fragments[-1].text
    space_index = raw.rfind(" ")
    if space_index < 0:
        logger.debug("Could not extract inventory level from '%s': no marker", raw)
        return None

    raw_level = raw[:space_index].strip()

    try:
        display = spell_check(raw_level, INVENTORY_LEVELS_BY_DISPLAY.keys(), config.max_distance)
    except NoCloseMatch:
        logger.debug("Could not extract inventory level from '%s'", raw)
        return None

    return INVENTORY_LEVELS_BY_DISPLAY[display]


def match_right_column(text: str) -> Optional[re.Match]:
    """Run the quantity/price pattern over the right column text."""
    return RIGHT_PATTERN.search(text)


def prepare_quantity_text(right: Column) -> str:
    return right.text.replace(" ", "")


def prepare_price_text(right: Column, config: ExtractionConfig = DEFAULT_CONFIG) -> str:
    text = right.text.lower().replace(" ", "")
    for source, target in config.price_substitutions:
        text = text.replace(source, target)
    return text


def parse_quantity(match: Optional[re.Match]) -> Optional[int]:
    """Quantity from the first captured group, thousands separators removed."""
    if match is None:
        return None

    raw = match.group(1).replace(",", "")
    if not raw.isdigit():
        return None

    return int(raw)


def parse_price(match: Optional[re.Match]) -> Optional[float]:
    """
    Price from the second captured group.

    Kiosk prices never show four digits before the "k" suffix takes over,
    so a value of 1000 or more means the currency glyph was read as a digit
    and is dropped with a modulo.
    """
    if match is None:
        return None

    raw = match.group(2).lower()
    is_thousands = raw.endswith("k")
    raw = raw.replace("k", "").strip()

    try:
        price = float(raw)
    except ValueError:
        return None

    if price >= 1000.0:
        price %= 1000

    if is_thousands:
        price *= 1000

    return price


def extract_quantity(right: Column) -> Optional[int]:
    quantity = parse_quantity(match_right_column(prepare_quantity_text(right)))
    if quantity is None:
        logger.debug("Could not extract quantity from: %r", right.text)
    return quantity


def extract_price(right: Column, config: ExtractionConfig = DEFAULT_CONFIG) -> Optional[float]:
    price = parse_price(match_right_column(prepare_price_text(right, config)))
    if price is None:
        logger.debug("Could not extract price from: %r", right.text)
    return price


# =============================================================================
# Listing
# =============================================================================

@dataclass(frozen=True)
class CommodityListing:
    """One kiosk row. Any field may be None when it could not be read."""
    commodity: Optional[str] = None
    inventory_level: Optional[InventoryLevel] = None
    quantity: Optional[int] = None
    price: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.commodity, self.inventory_level, self.quantity, self.price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "commodity": self.commodity,
            "inventory_level": self.inventory_level.display if self.inventory_level else None,
            "quantity": self.quantity,
            "price": self.price,
        }

    def __str__(self) -> str:
        quantity = f"{self.quantity} SCU" if self.quantity is not None else "? SCU"
        commodity = self.commodity if self.commodity is not None else "?"
        price = f"¤{self.price:f}/unit" if self.price is not None else "¤?/unit"
        inventory = f"({self.inventory_level.display})" if self.inventory_level else "(?)"

        return f"{quantity} of '{commodity}' for {price} {inventory}"


def extract_listing(
    left: Column,
    right: Column,
    config: ExtractionConfig = DEFAULT_CONFIG
) -> CommodityListing:
    """
    Build a listing from a (left, right) column pair.

    Never raises: each field that cannot be read is left as None.
    """
    return CommodityListing(
        commodity=extract_commodity(left),
        inventory_level=extract_inventory_level(left, config),
        quantity=extract_quantity(right),
        price=extract_price(right, config),
    )


def extract_listings(
    column_pairs: Iterable[Tuple[Column, Column]],
    config: ExtractionConfig = DEFAULT_CONFIG
) -> List[CommodityListing]:
    """Extract one listing per (left, right) row pair."""
    return [extract_listing(left, right, config) for left, right in column_pairs]
