#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_config.py
----------------------------------------------------------------------
Static configuration for the Parametric Controls panel.

The tracked parameter list is what the panel mirrors. Add or remove
names here; each name must match a slider nickname on the canvas
exactly (case-sensitive). Changes take effect the next time the panel
is opened.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Tuple


@dataclass(frozen=True)
class TrackedParameter:
    """One slider nickname the panel mirrors."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("tracked parameter name must not be empty")


DEFAULT_PARAMETERS: Tuple[TrackedParameter, ...] = (
    TrackedParameter("topCircleX"),
    TrackedParameter("topCircleY"),
    TrackedParameter("bottomCircleX"),
    TrackedParameter("bottomCircleY"),
    TrackedParameter("topCircleR"),
    TrackedParameter("bottomCircleR"),
)

DEFAULT_PRESET_DIR = Path.home() / "GH_Presets"


@dataclass
class PanelConfig:
    """
    Everything the panel needs to know before it is built.

    parameters   : tracked slider names, in row order.
    preset_dir   : starting directory for the save/load dialogs.
    title        : window title.
    minimum_size : (width, height) floor for the window.
    """

    parameters: Tuple[TrackedParameter, ...] = DEFAULT_PARAMETERS
    preset_dir: Path = DEFAULT_PRESET_DIR
    title: str = "Parametric Controls"
    minimum_size: Tuple[int, int] = (460, 80)

    # filled in __post_init__
    names: Tuple[str, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        self.parameters = tuple(self.parameters)
        self.preset_dir = Path(self.preset_dir)

        seen = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(f"duplicate tracked parameter: {param.name!r}")
            seen.add(param.name)
        self.names = tuple(p.name for p in self.parameters)

    @classmethod
    def from_names(cls, names: Iterable[str], **kwargs) -> "PanelConfig":
        return cls(parameters=tuple(TrackedParameter(n) for n in names), **kwargs)
