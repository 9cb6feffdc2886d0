# src/tetris_rules/config/io.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

from omegaconf import DictConfig, OmegaConf
from pydantic import BaseModel

from tetris_rules.config.game import GameConfig


def to_plain_dict(cfg: Any) -> dict[str, Any]:
    if isinstance(cfg, BaseModel):
        return cfg.model_dump(mode="json")
    if isinstance(cfg, DictConfig):
        data = OmegaConf.to_container(cfg, resolve=True)
        if not isinstance(data, dict):
            raise TypeError("config must resolve to a mapping")
        return data
    raise TypeError(f"unsupported config type: {type(cfg).__name__}")


def load_yaml(path: Path) -> dict[str, Any]:
    cfg = OmegaConf.load(Path(path))
    data = OmegaConf.to_container(cfg, resolve=True)
    if not isinstance(data, dict):
        raise TypeError(f"config({path}) must be a mapping")
    return data


def load_game_config(path: Optional[Path] = None, *, overrides: Sequence[str] = ()) -> GameConfig:
    """
    Build a GameConfig from an optional YAML file plus dot-list overrides
    (e.g. ["sweep.ruleset=grid", "timing.drop_interval_ms=500"]).
    """
    base = OmegaConf.create(load_yaml(path) if path is not None else {})
    if overrides:
        base = OmegaConf.merge(base, OmegaConf.from_dotlist([str(o) for o in overrides]))
    data = OmegaConf.to_container(base, resolve=True)
    if not isinstance(data, dict):
        raise TypeError("config must resolve to a mapping")
    return GameConfig.model_validate(data)


__all__ = ["to_plain_dict", "load_yaml", "load_game_config"]
