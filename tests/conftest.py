"""
Pytest configuration and shared fixtures for Kiosk Reader tests.

This module provides:
- Builders for fragments, columns and lexical results
- A sample kiosk capture as a lexical result
- Marker registration

Usage:
    pytest tests/ -v
    pytest tests/test_listing.py -v
"""

import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from kiosk_reader.utils import BoundingBox, Column, Fragment, LexicalResult


# =============================================================================
# Builders
# =============================================================================

def make_column(texts: Sequence[str], x: int = 0, y: int = 0, line_height: int = 20) -> Column:
    """Stack one fragment per text, top to bottom."""
    fragments = [
        Fragment(text, BoundingBox(x, y + i * line_height, 10 * max(len(text), 1), line_height - 2))
        for i, text in enumerate(texts)
    ]
    return Column(fragments)


def make_result(*columns: Sequence[str]) -> LexicalResult:
    """Lay columns out left to right."""
    return LexicalResult([make_column(texts, x=i * 400) for i, texts in enumerate(columns)])


@pytest.fixture
def column_factory():
    return make_column


@pytest.fixture
def result_factory():
    return make_result


# =============================================================================
# Sample Captures
# =============================================================================

@pytest.fixture
def known_locations() -> set:
    return {"New Babbage", "Area18", "Lorville", "Orison", "Port Tressler"}


@pytest.fixture
def kiosk_result() -> LexicalResult:
    """Location panel as the OCR engine typically reports it."""
    return make_result(
        ["Commodities", "Shop Name", "Your Inventories", "New Babbag", "Select a Location"],
        ["Buy", "Sell"],
    )


@pytest.fixture
def listing_columns() -> List[Column]:
    """A clean (left, right) row pair."""
    left = make_column(["Agricultural", "Supplies", "Medium 85%"])
    right = make_column(["1,234 SCU", "¤1.5k /unit"], x=400)
    return [left, right]


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "requires_opencv: marks tests that build images with OpenCV"
    )
