# src/tetris_rules/game/core/pieceset.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import yaml

from tetris_rules.game.core.constants import EMPTY_CELL
from tetris_rules.utils.paths import pieces_dir


def _parse_color(v: object) -> Optional[Tuple[int, int, int]]:
    if v is None:
        return None
    if not isinstance(v, (list, tuple)) or len(v) != 3:
        raise ValueError(f"color must be a 3-item list/tuple, got {v!r}")
    r, g, b = v
    for c in (r, g, b):
        if not isinstance(c, int) or not (0 <= c <= 255):
            raise ValueError(f"color components must be ints in [0,255], got {v!r}")
    return int(r), int(g), int(b)


def _parse_shape(rows: Sequence[str], *, board_id: int) -> np.ndarray:
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise ValueError("shape must be a non-empty list of strings")

    n = len(rows)
    out: List[List[int]] = []
    for r in rows:
        if not isinstance(r, str) or len(r) == 0:
            raise ValueError(f"shape rows must be non-empty strings, got {r!r}")
        if len(r) != n:
            raise ValueError(f"shape must be square, got {n} rows but a row of width {len(r)}")
        out.append([board_id if ch == "#" else EMPTY_CELL for ch in r])

    arr = np.asarray(out, dtype=np.uint8)
    if int(np.count_nonzero(arr)) <= 0:
        raise ValueError("shape must have at least one filled cell ('#')")

    # Templates are shared by every spawn; rotation always works on a copy.
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class PieceDef:
    kind: str
    board_id: int
    shape: np.ndarray  # (N,N) uint8, 0 or board_id, read-only
    color: Optional[Tuple[int, int, int]] = None

    @property
    def size(self) -> int:
        return int(self.shape.shape[0])

    def cell_count(self) -> int:
        return int(np.count_nonzero(self.shape))

    def working_copy(self) -> np.ndarray:
        return np.array(self.shape, dtype=np.uint8, copy=True)


@dataclass(frozen=True)
class PieceSet:
    """
    Immutable piece templates + optional colors, loaded from YAML.

    Provides:
      - stable ordering of kinds
      - shape(kind): the spawn matrix, cells hold the kind's board id
      - board_id(kind) in 1..K (0 reserved for empty)
    """

    pieces: Dict[str, PieceDef]
    kind_order: Tuple[str, ...]

    @staticmethod
    def default_classic7_path() -> Path:
        return pieces_dir() / "classic7.yaml"

    @classmethod
    def classic7(cls) -> "PieceSet":
        return cls.from_yaml(cls.default_classic7_path())

    @classmethod
    def from_yaml(cls, path: Path, *, expected_cells: Optional[int] = None) -> "PieceSet":
        p = Path(path)
        data = yaml.safe_load(p.read_text(encoding="utf-8"))

        if not isinstance(data, dict):
            raise ValueError(f"piece YAML must be a mapping at top-level, got {type(data)!r}")

        if expected_cells is None:
            v = data.get("expected_cells", None)
            if isinstance(v, int):
                expected_cells = v
            elif isinstance(v, str):
                expected_cells = int(v)
            elif v is not None:
                raise TypeError(f"expected_cells must be int or str, got {type(v)!r}")

        pieces_node = data.get("pieces")
        if not isinstance(pieces_node, dict) or not pieces_node:
            raise ValueError("piece YAML must contain non-empty mapping 'pieces:'")

        pieces: Dict[str, PieceDef] = {}
        kind_order: List[str] = []

        for i, (kind, spec) in enumerate(pieces_node.items()):
            if not isinstance(kind, str) or not kind:
                raise ValueError(f"piece key must be a non-empty string, got {kind!r}")
            if not isinstance(spec, dict):
                raise ValueError(f"piece spec for {kind!r} must be a mapping, got {type(spec)!r}")

            board_id = i + 1
            if board_id > 255:
                raise ValueError("at most 255 piece kinds fit the uint8 board encoding")

            shape = _parse_shape(spec.get("shape"), board_id=board_id)
            cells = int(np.count_nonzero(shape))
            if expected_cells is not None and cells != int(expected_cells):
                raise ValueError(f"{kind!r}: expected {expected_cells} filled cells, got {cells}")

            color = _parse_color(spec.get("color"))
            pieces[kind] = PieceDef(kind=kind, board_id=board_id, shape=shape, color=color)
            kind_order.append(kind)

        return cls(pieces=pieces, kind_order=tuple(kind_order))

    def kinds(self) -> Tuple[str, ...]:
        return self.kind_order

    def __contains__(self, kind: str) -> bool:
        return kind in self.pieces

    def __len__(self) -> int:
        return len(self.kind_order)

    def get(self, kind: str) -> PieceDef:
        try:
            return self.pieces[kind]
        except KeyError as e:
            raise KeyError(f"unknown piece kind {kind!r}. known kinds={list(self.kind_order)!r}") from e

    def shape(self, kind: str) -> np.ndarray:
        return self.get(kind).shape

    def board_id(self, kind: str) -> int:
        return int(self.get(kind).board_id)

    def board_id_to_kind(self, board_id: int) -> str:
        bid = int(board_id)
        if bid <= 0 or bid > len(self.kind_order):
            raise ValueError(f"board_id out of range: {bid} (valid 1..{len(self.kind_order)})")
        return self.kind_order[bid - 1]

    def color_of(self, kind: str) -> Optional[Tuple[int, int, int]]:
        return self.get(kind).color
