# src/tetris_rules/utils/paths.py
from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    return Path(__file__).resolve().parents[1]


def assets_dir() -> Path:
    """
    Return <package>/assets (must exist). Shipped as package data.
    """
    p = package_root() / "assets"
    if not p.is_dir():
        raise FileNotFoundError(f"Assets directory not found: {p}")
    return p


def pieces_dir() -> Path:
    """
    Return <package>/assets/pieces (must exist).
    """
    p = assets_dir() / "pieces"
    if not p.is_dir():
        raise FileNotFoundError(f"Pieces directory not found: {p}")
    return p


def default_best_score_path() -> Path:
    return Path.home() / ".tetris_rules" / "best_score.json"


__all__ = ["package_root", "assets_dir", "pieces_dir", "default_best_score_path"]
