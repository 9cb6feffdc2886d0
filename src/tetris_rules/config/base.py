# src/tetris_rules/config/base.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ConfigBase(BaseModel):
    """Every config node is immutable and rejects unknown keys (typos fail loudly)."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )


def coerce_int(value: object, *, where: str) -> int:
    """
    Int coercion for YAML/dot-list values ("5", 5.0, 5). Bools are refused:
    `seed: true` is almost always a typo.
    """
    if isinstance(value, bool):
        raise TypeError(f"{where} must be an int, got bool")
    if not isinstance(value, (int, float, str)):
        raise TypeError(f"{where} must be an int-like value, got {type(value)!r}")
    try:
        f = float(value)
    except ValueError as e:
        raise TypeError(f"{where} must be an int-like value, got {value!r}") from e
    if not f.is_integer():
        raise TypeError(f"{where} must be a whole number, got {value!r}")
    return int(f)


__all__ = ["ConfigBase", "coerce_int"]
