"""
Lexical model and file I/O helpers for Kiosk Reader.

An OCR result is an ordered sequence of columns (left to right), each an
ordered sequence of located text fragments (top to bottom).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import cv2
import numpy as np


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Represents a bounding box for a text region."""
    x: int
    y: int
    width: int
    height: int

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        """Smallest box containing both boxes."""
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.x + self.width, other.x + other.width)
        y2 = max(self.y + self.height, other.y + other.height)
        return BoundingBox(x1, y1, x2 - x1, y2 - y1)

    def to_list(self) -> List[int]:
        return [self.x, self.y, self.width, self.height]


@dataclass(frozen=True, eq=False)
class Fragment:
    """
    One OCR-detected run of text.

    Fragments compare and hash by identity: two detections with the same
    text at the same position are still distinct fragments.
    """
    text: str
    bbox: BoundingBox


@dataclass(frozen=True)
class Column:
    """Fragments aligned vertically on screen, ordered top to bottom."""
    fragments: Tuple[Fragment, ...] = ()

    def __post_init__(self):
        # Accept any iterable but store a tuple so the column stays immutable
        object.__setattr__(self, "fragments", tuple(self.fragments))

    @property
    def text(self) -> str:
        return "\n".join(fragment.text for fragment in self.fragments)

    @property
    def bbox(self) -> Optional[BoundingBox]:
        if not self.fragments:
            return None

        box = self.fragments[0].bbox
        for fragment in self.fragments[1:]:
            box = box.union(fragment.bbox)
        return box


@dataclass(frozen=True)
class LexicalResult:
    """Full OCR result for one capture, columns ordered left to right."""
    columns: Tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))

    @property
    def fragments(self) -> Tuple[Fragment, ...]:
        """All fragments in column order, then fragment order."""
        return tuple(
            fragment
            for column in self.columns
            for fragment in column.fragments
        )


# =============================================================================
# File I/O Utilities
# =============================================================================

def lexical_result_to_dict(result: LexicalResult) -> Dict[str, Any]:
    return {
        "columns": [
            {
                "fragments": [
                    {"text": fragment.text, "bbox": fragment.bbox.to_list()}
                    for fragment in column.fragments
                ]
            }
            for column in result.columns
        ]
    }


def lexical_result_from_dict(data: Dict[str, Any]) -> LexicalResult:
    columns = []
    for column_data in data.get("columns", []):
        fragments = [
            Fragment(
                text=str(fragment_data.get("text", "")),
                bbox=BoundingBox(*[int(v) for v in fragment_data["bbox"]])
            )
            for fragment_data in column_data.get("fragments", [])
        ]
        columns.append(Column(fragments))

    return LexicalResult(columns)


def save_lexical_result(result: LexicalResult, out_path: Union[str, Path]) -> None:
    """Save a lexical result to JSON for offline debugging."""
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(lexical_result_to_dict(result), f, indent=2, ensure_ascii=False)


def load_lexical_result(path: Union[str, Path]) -> LexicalResult:
    """Load a lexical result previously written by save_lexical_result."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return lexical_result_from_dict(data)


def draw_annotations(image: np.ndarray, result: LexicalResult) -> np.ndarray:
    """Draw column boxes, fragment boxes and labels on a copy of the image."""
    annotated = image.copy()

    for column_index, column in enumerate(result.columns):
        column_box = column.bbox
        if column_box is not None:
            cv2.rectangle(
                annotated,
                (column_box.x, column_box.y),
                (column_box.x + column_box.width, column_box.y + column_box.height),
                (255, 0, 0), 1
            )

        for fragment in column.fragments:
            bbox = fragment.bbox

            cv2.rectangle(
                annotated,
                (bbox.x, bbox.y),
                (bbox.x + bbox.width, bbox.y + bbox.height),
                (0, 255, 0), 2
            )

            label = f"C{column_index}: {fragment.text[:30]}"
            cv2.putText(
                annotated, label,
                (bbox.x, max(bbox.y - 5, 0)),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5,
                (0, 255, 0), 1
            )

    return annotated
