#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_sliders.py
----------------------------------------------------------------------
Find canvas sliders by nickname and read / write their values.

Lookups are a plain linear scan over the document's sliders; the first
exact (case-sensitive) match wins. A missing slider is reported as
None, never as an exception: callers skip that parameter.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def find_slider(document: Any, name: str) -> Optional[Any]:
    """Return the first slider whose nickname equals `name`, or None."""
    for slider in document.sliders():
        if slider.name == name:
            return slider
    return None


def get_slider_value(document: Any, name: str) -> Optional[float]:
    slider = find_slider(document, name)
    if slider is None:
        return None
    return float(slider.value)


def set_slider_value(document: Any, name: str, value: float) -> Optional[float]:
    """
    Clamp `value` into the slider's range, store it and expire the slider.

    The slider is only marked dirty; the caller issues one recompute
    request for the whole action. Returns the value the host actually
    stored (after its own rounding), or None if the slider is gone.
    """
    slider = find_slider(document, name)
    if slider is None:
        logger.debug("Slider %r not found; skipping write", name)
        return None

    clamped = clamp(float(value), float(slider.minimum), float(slider.maximum))
    if clamped != value:
        logger.debug("Clamped %r: %s -> %s", name, value, clamped)

    slider.set_value(clamped)
    slider.expire()
    return float(slider.value)


class SliderIndex:
    """
    Name -> slider cache for a fixed list of tracked names.

    Built once per panel build so row construction does not rescan the
    canvas for every parameter. refresh() rebuilds it; handles go stale
    when the host deletes the object, so writes still go through
    set_slider_value().
    """

    def __init__(self, document: Any, names: Iterable[str]) -> None:
        self.document = document
        self.names = tuple(names)
        self._handles: Dict[str, Any] = {}
        self.refresh()

    def refresh(self) -> None:
        wanted = set(self.names)
        handles: Dict[str, Any] = {}
        for slider in self.document.sliders():
            if slider.name in wanted and slider.name not in handles:
                handles[slider.name] = slider
        self._handles = handles

        missing = [n for n in self.names if n not in handles]
        if missing:
            logger.debug("Sliders not on canvas: %s", ", ".join(missing))

    def get(self, name: str) -> Optional[Any]:
        return self._handles.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)


__all__ = [
    "clamp",
    "find_slider",
    "get_slider_value",
    "set_slider_value",
    "SliderIndex",
]
