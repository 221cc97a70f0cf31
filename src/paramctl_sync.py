#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_sync.py
----------------------------------------------------------------------
Two-way value sync between panel rows and canvas sliders.

Panel sliders are integer-only, canvas sliders are reals with a fixed
number of decimal places. A row therefore works in "positions":

    position = round(value * 10 ** decimal_places)

Two directions:

- widget -> host : the user dragged a row. Unscale, update the readout,
  write the canvas slider (clamped) and ask for a soft recompute.
- host -> widget : "Sync from GH" or "Load Preset". Rows are updated in
  one batch while the SyncGuard is in APPLYING_BATCH, so the valueChanged
  echoes from setting N widgets are ignored instead of turning into N
  writes back into the host.

This module knows nothing about Qt. A row view is anything with:

    set_position(int)
    set_readout(str)
    set_range(int, int)
"""

from __future__ import annotations

import contextlib
import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

from paramctl_host import Recompute
from paramctl_sliders import find_slider, set_slider_value

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Scaling helpers
# ----------------------------------------------------------------------


def scale_for(decimals: int) -> int:
    return 10 ** int(decimals)


def to_position(value: float, decimals: int) -> int:
    return int(round(float(value) * scale_for(decimals)))


def from_position(position: int, scale: int) -> float:
    return position / float(scale)


def format_readout(value: float, decimals: int) -> str:
    return f"{float(value):.{int(decimals)}f}"


# ----------------------------------------------------------------------
# Reentrancy guard
# ----------------------------------------------------------------------


class SyncState(enum.Enum):
    IDLE = "idle"
    APPLYING_BATCH = "applying_batch"


class SyncGuard:
    """
    Two-state machine shared by every row of one panel.

    While a batch is applied, widget change handlers must do nothing.
    The state returns to IDLE when the batch ends, also when it ends
    with an exception.
    """

    def __init__(self) -> None:
        self.state = SyncState.IDLE

    @property
    def busy(self) -> bool:
        return self.state is SyncState.APPLYING_BATCH

    @contextlib.contextmanager
    def applying_batch(self) -> Iterator[None]:
        if self.busy:
            # Already inside a batch; the outer one owns the state.
            yield
            return

        self.state = SyncState.APPLYING_BATCH
        try:
            yield
        finally:
            self.state = SyncState.IDLE


# ----------------------------------------------------------------------
# Row bindings
# ----------------------------------------------------------------------


@dataclass
class RowBinding:
    """Link between one panel row and one canvas slider name."""

    name: str
    view: Any
    decimals: int

    @property
    def scale(self) -> int:
        return scale_for(self.decimals)

    def adopt_precision(self, slider: Any) -> None:
        """Follow a precision change on the canvas slider."""
        decimals = int(slider.decimal_places)
        if decimals == self.decimals:
            return
        logger.debug(
            "%s: decimal places %d -> %d", self.name, self.decimals, decimals
        )
        self.decimals = decimals
        self.view.set_range(
            to_position(slider.minimum, decimals),
            to_position(slider.maximum, decimals),
        )

    def show(self, value: float) -> None:
        self.view.set_position(to_position(value, self.decimals))
        self.view.set_readout(format_readout(value, self.decimals))


class SyncEngine:
    """
    Keeps a set of rows and their canvas sliders consistent.

    writes counts widget -> host writes; it only moves on user input.
    """

    def __init__(self, document: Any, guard: Optional[SyncGuard] = None) -> None:
        self.document = document
        self.guard = guard if guard is not None else SyncGuard()
        self.bindings: Dict[str, RowBinding] = {}
        self.writes = 0

    def bind(self, name: str, view: Any, slider: Any) -> RowBinding:
        binding = RowBinding(name=name, view=view, decimals=int(slider.decimal_places))
        self.bindings[name] = binding
        return binding

    # ---------------- widget -> host ----------------

    def on_widget_changed(self, name: str, position: int) -> bool:
        """Handle a user edit of one row. Returns True if the host was written."""
        if self.guard.busy:
            return False

        binding = self.bindings.get(name)
        if binding is None:
            return False

        value = from_position(position, binding.scale)
        binding.view.set_readout(format_readout(value, binding.decimals))

        stored = set_slider_value(self.document, name, value)
        if stored is None:
            return False

        self.writes += 1
        self.document.request_recompute(Recompute.SOFT)
        return True

    # ---------------- host -> widget ----------------

    def push_value(self, name: str, value: float) -> bool:
        """
        Show `value` on one row using the slider's current precision.

        Only valid inside a batch; outside one the widget echo would be
        written straight back into the host.
        """
        if not self.guard.busy:
            raise RuntimeError("push_value() called outside a batch")

        binding = self.bindings.get(name)
        if binding is None:
            return False

        slider = find_slider(self.document, name)
        if slider is not None:
            binding.adopt_precision(slider)
        binding.show(value)
        return True

    def sync_from_host(self) -> List[str]:
        """Pull every bound row's value from the canvas. Host is read only."""
        updated: List[str] = []
        with self.guard.applying_batch():
            for name in self.bindings:
                slider = find_slider(self.document, name)
                if slider is None:
                    continue
                if self.push_value(name, float(slider.value)):
                    updated.append(name)

        logger.info("Synced %d parameter(s) from canvas", len(updated))
        return updated

    def apply_preset(self, preset: Mapping[str, float]) -> List[str]:
        """
        Write preset values into the canvas and show them on the rows.

        Keys without a row are ignored. One soft recompute is requested
        after the batch is released.
        """
        applied: List[str] = []
        try:
            with self.guard.applying_batch():
                for name, value in preset.items():
                    if name not in self.bindings:
                        logger.debug("Preset key %r is not tracked; ignored", name)
                        continue
                    stored = set_slider_value(self.document, name, value)
                    if stored is None:
                        continue
                    self.push_value(name, stored)
                    applied.append(name)
        finally:
            if applied:
                self.document.request_recompute(Recompute.SOFT)

        logger.info("Applied %d preset value(s)", len(applied))
        return applied


__all__ = [
    "scale_for",
    "to_position",
    "from_position",
    "format_readout",
    "SyncState",
    "SyncGuard",
    "RowBinding",
    "SyncEngine",
]
