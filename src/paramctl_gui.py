#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_gui.py
----------------------------------------------------------------------
PyQt6 panel for "Parametric Controls".

- One row per tracked canvas slider:  [name]  [====slider====]  [value]
- Rows are only built for sliders that exist on the canvas right now.
- Buttons: Save Preset / Load Preset / Sync from GH.

All value logic lives in paramctl_sync.SyncEngine; this module only
builds widgets and routes their signals.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from PyQt6 import QtCore, QtWidgets

from paramctl_config import PanelConfig
from paramctl_presets import (
    PresetError,
    PresetStore,
    collect_preset,
    ensure_preset_dir,
    filter_tracked,
)
from paramctl_sliders import SliderIndex
from paramctl_sync import SyncEngine, format_readout, to_position

logger = logging.getLogger(__name__)

PRESET_FILTER = "JSON Preset (*.json)"


class ParameterRow(QtWidgets.QWidget):
    """
    Horizontal row for one canvas slider:

        [name]  [   slider   ]  [readout]

    The slider works on integer positions; the SyncEngine does the
    scaling. Emits positionChanged(name, position) for every change,
    programmatic or not; the engine decides what to ignore.
    """

    positionChanged = QtCore.pyqtSignal(str, int)

    def __init__(
        self,
        name: str,
        minimum: int,
        maximum: int,
        position: int,
        readout: str,
        parent=None,
    ) -> None:
        super().__init__(parent)

        self.param_name = name

        layout = QtWidgets.QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(10)
        self.setLayout(layout)

        self.name_label = QtWidgets.QLabel(name)
        self.name_label.setFixedWidth(130)
        self.name_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignVCenter)

        self.slider = QtWidgets.QSlider(QtCore.Qt.Orientation.Horizontal)
        self.slider.setMinimumWidth(200)
        self.slider.setRange(minimum, maximum)
        self.slider.setValue(position)

        self.readout = QtWidgets.QLabel(readout)
        self.readout.setFixedWidth(55)
        self.readout.setAlignment(QtCore.Qt.AlignmentFlag.AlignVCenter)

        layout.addWidget(self.name_label)
        layout.addWidget(self.slider, 1)
        layout.addWidget(self.readout)

        self.slider.valueChanged.connect(self._on_slider_changed)

    # ---------------- row view API (used by SyncEngine) ----------------

    def set_position(self, position: int) -> None:
        self.slider.setValue(position)

    def set_readout(self, text: str) -> None:
        self.readout.setText(text)

    def set_range(self, minimum: int, maximum: int) -> None:
        self.slider.setRange(minimum, maximum)

    # ---------------- accessors ----------------

    def position(self) -> int:
        return self.slider.value()

    def readout_text(self) -> str:
        return self.readout.text()

    # ---------------- internal slot ----------------

    def _on_slider_changed(self, position: int) -> None:
        self.positionChanged.emit(self.param_name, position)


class ParamWindow(QtWidgets.QWidget):
    """
    Floating panel mirroring the tracked canvas sliders.

    on_closed is called with the window when it closes, whoever closed
    it; PanelSession uses that to forget the instance.
    """

    def __init__(
        self,
        config: PanelConfig,
        document: Any,
        on_closed: Optional[Callable[["ParamWindow"], None]] = None,
        parent=None,
    ) -> None:
        super().__init__(parent)

        self.config = config
        self.document = document
        self._on_closed = on_closed

        self.engine = SyncEngine(document)
        self.rows: Dict[str, ParameterRow] = {}
        self.last_preset_path: Optional[Path] = None

        self.setWindowTitle(config.title)
        self.setMinimumSize(*config.minimum_size)
        self.setWindowFlag(QtCore.Qt.WindowType.Tool, True)

        self._build_ui()

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        main_layout = QtWidgets.QVBoxLayout()
        main_layout.setContentsMargins(14, 14, 14, 14)
        main_layout.setSpacing(14)
        self.setLayout(main_layout)

        rows_layout = QtWidgets.QVBoxLayout()
        rows_layout.setSpacing(8)

        index = SliderIndex(self.document, self.config.names)
        for param in self.config.parameters:
            slider = index.get(param.name)
            if slider is None:
                continue

            decimals = int(slider.decimal_places)
            value = float(slider.value)
            row = ParameterRow(
                param.name,
                to_position(slider.minimum, decimals),
                to_position(slider.maximum, decimals),
                to_position(value, decimals),
                format_readout(value, decimals),
            )
            self.engine.bind(param.name, row, slider)
            row.positionChanged.connect(self._on_row_changed)
            self.rows[param.name] = row
            rows_layout.addWidget(row)

        logger.info(
            "Built %d of %d row(s)", len(self.rows), len(self.config.parameters)
        )
        main_layout.addLayout(rows_layout)

        # ---------- buttons ----------
        btn_layout = QtWidgets.QHBoxLayout()
        btn_layout.setSpacing(8)

        self.save_preset_button = QtWidgets.QPushButton("Save Preset")
        self.load_preset_button = QtWidgets.QPushButton("Load Preset")
        self.sync_button = QtWidgets.QPushButton("Sync from GH")

        self.save_preset_button.clicked.connect(self._on_save_preset)
        self.load_preset_button.clicked.connect(self._on_load_preset)
        self.sync_button.clicked.connect(self._on_sync)

        btn_layout.addWidget(self.save_preset_button)
        btn_layout.addWidget(self.load_preset_button)
        btn_layout.addWidget(self.sync_button)
        btn_layout.addStretch(1)

        main_layout.addLayout(btn_layout)

    # ------------------------------------------------------------------
    # Dialog helpers (replaced in tests)
    # ------------------------------------------------------------------

    def _ask_save_path(self, directory: Path) -> str:
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Save Preset", str(directory), PRESET_FILTER
        )
        return path

    def _ask_open_path(self, directory: Path) -> str:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Load Preset", str(directory), PRESET_FILTER
        )
        return path

    def _show_error(self, title: str, message: str) -> None:
        QtWidgets.QMessageBox.critical(self, title, message)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_row_changed(self, name: str, position: int) -> None:
        self.engine.on_widget_changed(name, position)

    def _on_sync(self) -> None:
        try:
            self.engine.sync_from_host()
        except Exception as exc:
            logger.exception("Sync from canvas failed")
            self._show_error("Error Syncing", str(exc))

    # ---------- Presets ----------

    def _on_save_preset(self) -> None:
        preset = collect_preset(self.document, self.config.parameters)

        try:
            directory = ensure_preset_dir(self.config.preset_dir)
        except OSError as exc:
            logger.warning("Cannot create preset folder: %s", exc)
            self._show_error("Error Saving Preset", str(exc))
            return

        path = self._ask_save_path(directory)
        if not path:
            return

        try:
            self.last_preset_path = PresetStore.save_preset_to_file(path, preset)
        except OSError as exc:
            logger.warning("Saving preset failed: %s", exc)
            self._show_error("Error Saving Preset", str(exc))

    def _on_load_preset(self) -> None:
        directory = self.config.preset_dir
        path = self._ask_open_path(directory if directory.is_dir() else Path.home())
        if not path:
            return

        try:
            preset = PresetStore.load_preset_from_file(path)
        except (PresetError, OSError) as exc:
            logger.warning("Loading preset failed: %s", exc)
            self._show_error("Error Loading Preset", str(exc))
            return

        tracked = filter_tracked(preset, self.config.parameters)
        if len(tracked) < len(preset):
            logger.info(
                "Ignoring %d untracked preset key(s)", len(preset) - len(tracked)
            )

        try:
            self.engine.apply_preset(tracked)
        except Exception as exc:
            logger.exception("Applying preset failed")
            self._show_error("Error Loading Preset", str(exc))
            return

        self.last_preset_path = Path(path)

    # ------------------------------------------------------------------
    # Close hook
    # ------------------------------------------------------------------

    def closeEvent(self, event) -> None:  # type: ignore[override]
        if self._on_closed is not None:
            self._on_closed(self)
        super().closeEvent(event)


__all__ = ["ParameterRow", "ParamWindow"]
