"""
OCR engine adapters producing lexical results.

Engines are stateful and not reentrant: acquire one per read cycle and close
it when the cycle ends, preferably with a ``with`` block.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pytesseract

from .exceptions import OCRError
from .preprocessing import ImageManipulation, apply_manipulations
from .utils import BoundingBox, Column, Fragment, LexicalResult

logger = logging.getLogger(__name__)


class OCREngine:
    """Base class for OCR engines."""

    def __init__(self, manipulations: Optional[Iterable[ImageManipulation]] = None):
        self.manipulations: List[ImageManipulation] = list(manipulations or [])
        self.closed = False

    def read(self, image: np.ndarray) -> LexicalResult:
        """Preprocess then recognize an image."""
        if self.closed:
            raise OCRError(f"{type(self).__name__} is closed")

        processed = apply_manipulations(image, self.manipulations)
        return self._recognize(processed)

    def _recognize(self, image: np.ndarray) -> LexicalResult:
        raise NotImplementedError

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> 'OCREngine':
        return self

    def __exit__(self, *args) -> None:
        self.close()


class TesseractOCR(OCREngine):
    """
    Tesseract wrapper.

    Tesseract already groups words into blocks, paragraphs and lines. Each
    line becomes a fragment and each block a column.
    """

    def __init__(
        self,
        manipulations: Optional[Iterable[ImageManipulation]] = None,
        config: str = "--psm 11",
        lang: str = "eng"
    ):
        super().__init__(manipulations)
        self.config = config
        self.lang = lang
        logger.debug("Initialized Tesseract (lang=%s, config=%s)", lang, config)

    def _recognize(self, image: np.ndarray) -> LexicalResult:
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.lang,
                config=self.config,
                output_type=pytesseract.Output.DICT
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise OCRError(f"Tesseract failed: {e}") from e

        return build_lexical_result(data)


def _is_word(data: Dict[str, List[Any]], i: int) -> bool:
    text = str(data['text'][i]).strip()
    if not text:
        return False

    try:
        return float(data['conf'][i]) != -1
    except (TypeError, ValueError):
        return False


def build_lexical_result(data: Dict[str, List[Any]]) -> LexicalResult:
    """
    Convert pytesseract.image_to_data output into a lexical result.

    Returns:
        LexicalResult with one column per block, in Tesseract's order
    """
    # {block: {(par, line): [(text, bbox), ...]}}
    blocks = OrderedDict()

    for i in range(len(data['text'])):
        if not _is_word(data, i):
            continue

        block = int(data['block_num'][i])
        line_key = (int(data['par_num'][i]), int(data['line_num'][i]))
        bbox = BoundingBox(
            int(data['left'][i]), int(data['top'][i]),
            int(data['width'][i]), int(data['height'][i])
        )

        lines = blocks.setdefault(block, OrderedDict())
        lines.setdefault(line_key, []).append((str(data['text'][i]).strip(), bbox))

    columns = []
    for lines in blocks.values():
        fragments = []
        for words in lines.values():
            text = " ".join(word for word, _ in words)
            bbox = words[0][1]
            for _, word_bbox in words[1:]:
                bbox = bbox.union(word_bbox)
            fragments.append(Fragment(text, bbox))
        columns.append(Column(fragments))

    return LexicalResult(columns)
