#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_presets.py
----------------------------------------------------------------------
JSON presets for the Parametric Controls panel.

A preset is a flat JSON object, one key per slider nickname:

    {
      "topCircleX": 3.2,
      "topCircleY": 8.0,
      "topCircleR": 1.5
    }

The store does not know about Qt or the canvas. The panel collects the
mapping with collect_preset(), hands it to PresetStore to write, and on
load gets back a fully validated mapping to apply.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Union

from paramctl_config import TrackedParameter
from paramctl_sliders import get_slider_value

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
PRESET_SUFFIX = ".json"


class PresetError(Exception):
    """Base class for preset problems shown to the user."""


class PresetParseError(PresetError):
    """The preset file is not a JSON object of name -> number."""


def collect_preset(document: Any, parameters: Iterable[TrackedParameter]) -> Dict[str, float]:
    """Read every tracked slider; sliders missing from the canvas are left out."""
    preset: Dict[str, float] = {}
    for param in parameters:
        value = get_slider_value(document, param.name)
        if value is not None:
            preset[param.name] = value
    return preset


def filter_tracked(preset: Mapping[str, float], parameters: Iterable[TrackedParameter]) -> Dict[str, float]:
    names = {p.name for p in parameters}
    return {k: v for k, v in preset.items() if k in names}


def ensure_preset_dir(path: PathLike) -> Path:
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def normalize_preset_path(path: PathLike) -> Path:
    """Append .json when the user typed a bare name."""
    p = Path(path)
    if p.suffix.lower() != PRESET_SUFFIX:
        p = p.with_name(p.name + PRESET_SUFFIX)
    return p


def _validate(data: Any, source: str) -> Dict[str, float]:
    if not isinstance(data, dict):
        raise PresetParseError(f"{source}: expected a JSON object, got {type(data).__name__}")

    preset: Dict[str, float] = {}
    for key, value in data.items():
        # bool is an int subclass; true/false are not slider values
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PresetParseError(f"{source}: value for {key!r} is not a number: {value!r}")
        try:
            number = float(value)
        except OverflowError as exc:
            raise PresetParseError(f"{source}: value for {key!r} is out of range") from exc
        if not math.isfinite(number):
            raise PresetParseError(f"{source}: value for {key!r} is not finite")
        preset[key] = number
    return preset


class PresetStore:
    """
    Wraps JSON serialization of preset dictionaries.

    File errors (OSError) propagate unchanged; the panel catches them
    alongside PresetError and shows a message box.
    """

    @staticmethod
    def save_preset_to_file(path: PathLike, preset: Mapping[str, float]) -> Path:
        target = normalize_preset_path(path)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(dict(preset), f, indent=2)
            f.write("\n")
        logger.info("Saved %d value(s) to %s", len(preset), target)
        return target

    @staticmethod
    def load_preset_from_file(path: PathLike) -> Dict[str, float]:
        """
        Parse and validate the whole file before returning anything.

        Raises PresetParseError on malformed JSON or non-numeric values.
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                text = f.read()
            except UnicodeDecodeError as exc:
                raise PresetParseError(f"{path}: not UTF-8 text") from exc

        try:
            data = json.loads(text)
        except ValueError as exc:
            # JSONDecodeError, or an integer literal past the digit limit
            raise PresetParseError(f"{path}: {exc}") from exc

        preset = _validate(data, str(path))
        logger.info("Loaded %d value(s) from %s", len(preset), path)
        return preset


__all__ = [
    "PRESET_SUFFIX",
    "PresetError",
    "PresetParseError",
    "collect_preset",
    "filter_tracked",
    "ensure_preset_dir",
    "normalize_preset_path",
    "PresetStore",
]
