# tests/test_pieceset.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from tetris_rules.game.core.pieceset import PieceSet


def test_classic7_order_ids_and_sizes() -> None:
    ps = PieceSet.classic7()
    assert ps.kinds() == ("I", "O", "T", "S", "Z", "J", "L")
    assert [ps.board_id(k) for k in ps.kinds()] == [1, 2, 3, 4, 5, 6, 7]
    assert ps.board_id_to_kind(3) == "T"
    assert ps.get("I").size == 4
    assert ps.get("O").size == 2
    assert ps.get("S").size == 3
    assert all(ps.get(k).cell_count() == 4 for k in ps.kinds())
    assert ps.color_of("T") == (160, 0, 240)


def test_templates_are_read_only_and_copies_are_not() -> None:
    ps = PieceSet.classic7()
    tmpl = ps.shape("J")
    with pytest.raises(ValueError):
        tmpl[0, 0] = 0

    m = ps.get("J").working_copy()
    m[0, 0] = 0
    assert ps.shape("J")[0, 0] == 6
    assert set(np.unique(tmpl).tolist()) == {0, 6}


def test_unknown_kind_lists_known_kinds() -> None:
    ps = PieceSet.classic7()
    with pytest.raises(KeyError, match="known kinds"):
        ps.get("X")
    with pytest.raises(ValueError, match="out of range"):
        ps.board_id_to_kind(0)


def test_from_yaml_validates_shapes(tmp_path: Path) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text('pieces:\n  A:\n    shape: ["##", "#"]\n', encoding="utf-8")
    with pytest.raises(ValueError, match="square"):
        PieceSet.from_yaml(p)

    p.write_text('expected_cells: 4\npieces:\n  A:\n    shape: ["##", "#."]\n', encoding="utf-8")
    with pytest.raises(ValueError, match="expected 4 filled cells"):
        PieceSet.from_yaml(p)

    p.write_text('pieces:\n  A:\n    shape: ["#"]\n    color: [300, 0, 0]\n', encoding="utf-8")
    with pytest.raises(ValueError, match="color"):
        PieceSet.from_yaml(p)


def test_custom_set_without_colors(tmp_path: Path) -> None:
    p = tmp_path / "mini.yaml"
    p.write_text('pieces:\n  dot:\n    shape: ["#"]\n  bar:\n    shape: ["..", "##"]\n', encoding="utf-8")
    ps = PieceSet.from_yaml(p)
    assert ps.kinds() == ("dot", "bar")
    assert ps.color_of("dot") is None
    assert ps.shape("bar").tolist() == [[0, 0], [2, 2]]
