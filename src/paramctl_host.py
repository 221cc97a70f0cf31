#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_host.py
----------------------------------------------------------------------
The host side of the panel: slider documents and the script output.

The panel never owns host state. It only talks to a "document" that
can enumerate its sliders and accept a recompute request:

    document.sliders()              -> iterable of slider handles
    document.request_recompute(mode)

and to slider handles exposing:

    name, minimum, maximum, value, decimal_places
    set_value(value)   # host applies its own rounding
    expire()           # mark dirty, do not solve

Two documents are provided:

- MemoryDocument : an in-process stand-in used by the stand-alone app
  and the tests.
- GrasshopperDocument : a thin adapter over a live GH_Document. The
  Grasshopper and .NET types are imported on first use, so this module
  imports fine outside Rhino.

ScriptOutput is the informational output channel of the script
component (its "out" parameter); ScriptOutputHandler routes log records
into it.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class Recompute(enum.Enum):
    """How much of the host graph a recompute request touches."""

    SOFT = "soft"  # only expired objects re-evaluate
    FULL = "full"  # expire everything, then solve


# ----------------------------------------------------------------------
# In-memory document
# ----------------------------------------------------------------------


class MemorySlider:
    """A numeric slider living in a MemoryDocument."""

    def __init__(
        self,
        name: str,
        minimum: float,
        maximum: float,
        value: float,
        decimal_places: int = 2,
    ) -> None:
        if decimal_places < 0:
            raise ValueError("decimal_places must be non-negative")
        if minimum > maximum:
            raise ValueError(f"slider {name!r}: minimum > maximum")
        self.name = name
        self.minimum = float(minimum)
        self.maximum = float(maximum)
        self.decimal_places = int(decimal_places)
        self.expired = False
        self._value = 0.0
        self.set_value(value)

    @property
    def value(self) -> float:
        return self._value

    def set_value(self, value: float) -> None:
        # Host-side rounding to the declared precision.
        self._value = round(float(value), self.decimal_places)

    def expire(self) -> None:
        self.expired = True

    def __repr__(self) -> str:
        return (
            f"MemorySlider({self.name!r}, {self.minimum}, {self.maximum}, "
            f"{self.value}, decimal_places={self.decimal_places})"
        )


class MemoryComponent:
    """Any non-slider canvas object (panels, scripts, geometry ...)."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.expired = False

    def expire(self) -> None:
        self.expired = True


class MemoryDocument:
    """
    Minimal stand-in for a host document.

    Objects keep insertion order, so lookups behave like a canvas scan.
    Every recompute request bumps solution_count and notifies listeners
    (the stand-alone host window uses that to refresh its spin boxes).
    """

    def __init__(self, objects: Optional[Iterable[Any]] = None) -> None:
        self.objects: List[Any] = list(objects or [])
        self.solution_count = 0
        self.last_recompute: Optional[Recompute] = None
        self._listeners: List[Callable[["MemoryDocument"], None]] = []

    def add_slider(
        self,
        name: str,
        minimum: float,
        maximum: float,
        value: float,
        decimal_places: int = 2,
    ) -> MemorySlider:
        slider = MemorySlider(name, minimum, maximum, value, decimal_places)
        self.objects.append(slider)
        return slider

    def remove(self, name: str) -> None:
        """Remove every object with this name from the canvas."""
        self.objects = [o for o in self.objects if getattr(o, "name", None) != name]

    def sliders(self) -> Iterator[MemorySlider]:
        for obj in self.objects:
            if isinstance(obj, MemorySlider):
                yield obj

    def add_listener(self, callback: Callable[["MemoryDocument"], None]) -> None:
        self._listeners.append(callback)

    def request_recompute(self, mode: Recompute = Recompute.SOFT) -> None:
        if mode is Recompute.FULL:
            for obj in self.objects:
                obj.expire()

        for obj in self.objects:
            obj.expired = False

        self.solution_count += 1
        self.last_recompute = mode
        logger.debug("Solution #%d (%s)", self.solution_count, mode.value)

        for callback in list(self._listeners):
            callback(self)


# ----------------------------------------------------------------------
# Grasshopper adapter
# ----------------------------------------------------------------------


def _default_slider_type() -> type:
    from Grasshopper.Kernel.Special import GH_NumberSlider  # type: ignore

    return GH_NumberSlider


def _default_decimal_factory() -> Callable[[float], Any]:
    import System  # type: ignore

    return System.Decimal


class GrasshopperSlider:
    """Wraps one GH_NumberSlider with the slider-handle interface."""

    def __init__(self, obj: Any, decimal_factory: Callable[[float], Any]) -> None:
        self._obj = obj
        self._decimal = decimal_factory

    @property
    def name(self) -> str:
        return str(self._obj.NickName)

    @property
    def minimum(self) -> float:
        return float(self._obj.Slider.Minimum)

    @property
    def maximum(self) -> float:
        return float(self._obj.Slider.Maximum)

    @property
    def value(self) -> float:
        return float(self._obj.Slider.Value)

    @property
    def decimal_places(self) -> int:
        return int(self._obj.Slider.DecimalPlaces)

    def set_value(self, value: float) -> None:
        self._obj.Slider.Value = self._decimal(value)

    def expire(self) -> None:
        self._obj.ExpireSolution(False)


class GrasshopperDocument:
    """
    Adapter over a live GH_Document.

    Inside a script component, pass ghenv.Component.OnPingDocument().
    slider_type / decimal_factory default to GH_NumberSlider and
    System.Decimal; both are resolved lazily.
    """

    def __init__(
        self,
        gh_document: Any,
        slider_type: Optional[type] = None,
        decimal_factory: Optional[Callable[[float], Any]] = None,
    ) -> None:
        self._doc = gh_document
        self._slider_type = slider_type
        self._decimal_factory = decimal_factory

    @property
    def gh_document(self) -> Any:
        return self._doc

    def sliders(self) -> Iterator[GrasshopperSlider]:
        if self._slider_type is None:
            self._slider_type = _default_slider_type()
        if self._decimal_factory is None:
            self._decimal_factory = _default_decimal_factory()

        for obj in self._doc.Objects:
            if isinstance(obj, self._slider_type):
                yield GrasshopperSlider(obj, self._decimal_factory)

    def request_recompute(self, mode: Recompute = Recompute.SOFT) -> None:
        self._doc.NewSolution(mode is Recompute.FULL)


# ----------------------------------------------------------------------
# Script output channel
# ----------------------------------------------------------------------


class ScriptOutput:
    """
    The script component's informational output.

    Mirrors the out/err lists a script component fills during one run;
    lines() gives errors first, then regular messages, which is the
    order the component reports them.
    """

    def __init__(self) -> None:
        self.out: List[str] = []
        self.err: List[str] = []
        self._listeners: List[Callable[[str], None]] = []

    def print(self, text: str) -> None:
        self.out.append(text)
        self._notify(text)

    def error(self, text: str) -> None:
        self.err.append(text)
        self._notify(text)

    def clear(self) -> None:
        self.out.clear()
        self.err.clear()

    def lines(self) -> List[str]:
        return self.err + self.out

    def add_listener(self, callback: Callable[[str], None]) -> None:
        self._listeners.append(callback)

    def _notify(self, text: str) -> None:
        for callback in list(self._listeners):
            callback(text)


class ScriptOutputHandler(logging.Handler):
    """Logging handler that writes records into a ScriptOutput."""

    def __init__(self, output: ScriptOutput, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.output = output
        self.setFormatter(logging.Formatter("[%(name)s] %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
        except Exception:
            self.handleError(record)
            return
        if record.levelno >= logging.WARNING:
            self.output.error(text)
        else:
            self.output.print(text)


__all__ = [
    "Recompute",
    "MemorySlider",
    "MemoryComponent",
    "MemoryDocument",
    "GrasshopperSlider",
    "GrasshopperDocument",
    "ScriptOutput",
    "ScriptOutputHandler",
]
