"""
Tests for recognition.py and preprocessing.py.

Tesseract itself is never invoked: pytesseract.image_to_data is replaced with
canned output so that only the mapping onto the lexical model is tested.

Usage:
    pytest tests/test_recognition.py -v
"""

import numpy as np
import pytesseract
import pytest

from kiosk_reader.exceptions import OCRError
from kiosk_reader.preprocessing import (
    AdaptiveThreshold,
    ConvertToGreyscale,
    InvertColors,
    UpscaleTo4k,
    apply_manipulations,
    default_manipulations,
)
from kiosk_reader.recognition import TesseractOCR, build_lexical_result
from kiosk_reader.utils import BoundingBox


def tesseract_data(rows):
    """Build image_to_data style output from (block, par, line, text, conf, box) rows."""
    data = {key: [] for key in
            ["block_num", "par_num", "line_num", "text", "conf", "left", "top", "width", "height"]}
    for block, par, line, text, conf, (x, y, w, h) in rows:
        data["block_num"].append(block)
        data["par_num"].append(par)
        data["line_num"].append(line)
        data["text"].append(text)
        data["conf"].append(conf)
        data["left"].append(x)
        data["top"].append(y)
        data["width"].append(w)
        data["height"].append(h)
    return data


KIOSK_DATA = tesseract_data([
    (1, 0, 0, "", -1, (0, 0, 300, 200)),
    (1, 1, 1, "Your", 95, (10, 10, 40, 20)),
    (1, 1, 1, "Inventories", 93, (55, 10, 110, 20)),
    (1, 1, 2, "New", 90, (10, 40, 35, 20)),
    (1, 1, 2, "Babbag", 71, (50, 40, 70, 20)),
    (2, 1, 1, "1,234", "88.5", (400, 10, 50, 20)),
    (2, 1, 1, "SCU", "90", (455, 10, 30, 20)),
    (2, 1, 2, " ", "-1", (400, 40, 5, 20)),
    (2, 1, 3, "¤1.5k", 80, (400, 70, 60, 20)),
])


# =============================================================================
# Lexical Mapping Tests
# =============================================================================

class TestBuildLexicalResult:
    """Test mapping of Tesseract word data onto columns and fragments."""

    def test_blocks_become_columns(self):
        result = build_lexical_result(KIOSK_DATA)
        assert len(result.columns) == 2

    def test_lines_become_fragments(self):
        result = build_lexical_result(KIOSK_DATA)
        assert [f.text for f in result.columns[0].fragments] == ["Your Inventories", "New Babbag"]
        assert result.columns[1].text == "1,234 SCU\n¤1.5k"

    def test_fragment_box_is_union_of_words(self):
        result = build_lexical_result(KIOSK_DATA)
        assert result.columns[0].fragments[0].bbox == BoundingBox(10, 10, 155, 20)

    def test_empty_data(self):
        result = build_lexical_result(tesseract_data([]))
        assert result.columns == ()


class TestTesseractOCR:
    """Test the Tesseract adapter with a stubbed backend."""

    def test_read(self, monkeypatch):
        calls = []

        def fake_image_to_data(image, lang, config, output_type):
            calls.append((image.shape, lang, config))
            return KIOSK_DATA

        monkeypatch.setattr(pytesseract, "image_to_data", fake_image_to_data)

        with TesseractOCR(manipulations=[ConvertToGreyscale()]) as engine:
            result = engine.read(np.zeros((30, 60, 3), dtype=np.uint8))

        assert engine.closed
        assert calls == [((30, 60), "eng", "--psm 11")]
        assert result.fragments[1].text == "New Babbag"

    def test_tesseract_failure(self, monkeypatch):
        def failing_image_to_data(*args, **kwargs):
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, "image_to_data", failing_image_to_data)

        with pytest.raises(OCRError):
            TesseractOCR().read(np.zeros((10, 10), dtype=np.uint8))


# =============================================================================
# Preprocessing Tests
# =============================================================================

@pytest.mark.requires_opencv
class TestPreprocessing:
    """Test image manipulations on synthetic images."""

    def test_greyscale(self):
        image = np.full((10, 20, 3), 100, dtype=np.uint8)
        grey = ConvertToGreyscale().apply(image)
        assert grey.shape == (10, 20)

    def test_greyscale_passthrough(self):
        image = np.full((10, 20), 7, dtype=np.uint8)
        assert np.array_equal(ConvertToGreyscale().apply(image), image)

    def test_invert(self):
        image = np.array([[0, 255], [10, 200]], dtype=np.uint8)
        assert np.array_equal(InvertColors().apply(image), 255 - image)

    def test_upscale_keeps_aspect_ratio(self):
        image = np.zeros((100, 200), dtype=np.uint8)
        upscaled = UpscaleTo4k(target_width=400).apply(image)
        assert upscaled.shape == (200, 400)

    def test_threshold_is_binary(self):
        image = np.random.RandomState(0).randint(0, 256, (40, 40), dtype=np.uint8)
        binary = AdaptiveThreshold().apply(image)
        assert set(np.unique(binary)) <= {0, 255}

    def test_threshold_rejects_even_block(self):
        with pytest.raises(ValueError):
            AdaptiveThreshold(block_size=10)

    def test_default_chain(self):
        image = np.zeros((54, 96, 3), dtype=np.uint8)
        processed = apply_manipulations(image, default_manipulations())
        assert processed.shape == (2160, 3840)

    def test_empty_image_rejected(self):
        with pytest.raises(ValueError):
            apply_manipulations(np.zeros((0, 0), dtype=np.uint8), [InvertColors()])
