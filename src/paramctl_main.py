#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_main.py
----------------------------------------------------------------------
Stand-alone entry point for "Parametric Controls".

Outside Rhino there is no canvas, so this runs the panel against a
MemoryDocument and shows a small host window in its place:

    [x] show                 <- the script component's boolean input
    topCircleX   [ 3.20 ]    <- canvas sliders, editable
    ...
    [ output ]               <- the component's "out" messages
"""

from __future__ import annotations

import logging
import sys
from typing import Dict

from PyQt6 import QtWidgets

from paramctl_config import PanelConfig
from paramctl_host import MemoryDocument, Recompute, ScriptOutput, ScriptOutputHandler
from paramctl_session import PanelSession
from paramctl_sliders import set_slider_value

logger = logging.getLogger(__name__)


def build_demo_document() -> MemoryDocument:
    """Canvas matching the default tracked parameters."""
    doc = MemoryDocument()
    doc.add_slider("topCircleX", -10.0, 10.0, 3.2, decimal_places=2)
    doc.add_slider("topCircleY", 0.0, 20.0, 8.0, decimal_places=1)
    doc.add_slider("bottomCircleX", -10.0, 10.0, 0.0, decimal_places=2)
    doc.add_slider("bottomCircleY", -20.0, 0.0, -4.0, decimal_places=1)
    doc.add_slider("topCircleR", 0.1, 5.0, 1.5, decimal_places=2)
    doc.add_slider("bottomCircleR", 0.1, 10.0, 3.0, decimal_places=2)
    return doc


class HostWindow(QtWidgets.QWidget):
    """Stands in for the canvas and the script component."""

    def __init__(
        self,
        session: PanelSession,
        document: MemoryDocument,
        output: ScriptOutput,
        parent=None,
    ) -> None:
        super().__init__(parent)

        self.session = session
        self.document = document
        self.output = output
        self.spin_boxes: Dict[str, QtWidgets.QDoubleSpinBox] = {}

        self.setWindowTitle("Canvas")
        self._build_ui()

        document.add_listener(lambda _doc: self._refresh_spin_boxes())
        output.add_listener(self.output_view.appendPlainText)

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout()
        layout.setContentsMargins(10, 10, 10, 10)
        self.setLayout(layout)

        self.show_checkbox = QtWidgets.QCheckBox("show")
        self.show_checkbox.toggled.connect(self.session.run_script)
        layout.addWidget(self.show_checkbox)

        form = QtWidgets.QFormLayout()
        for slider in self.document.sliders():
            spin = QtWidgets.QDoubleSpinBox()
            spin.setDecimals(slider.decimal_places)
            spin.setRange(slider.minimum, slider.maximum)
            spin.setSingleStep(10 ** -slider.decimal_places)
            spin.setValue(slider.value)
            spin.valueChanged.connect(
                lambda value, name=slider.name: self._on_canvas_slider_changed(name, value)
            )
            self.spin_boxes[slider.name] = spin
            form.addRow(slider.name, spin)
        layout.addLayout(form)

        self.output_view = QtWidgets.QPlainTextEdit()
        self.output_view.setReadOnly(True)
        self.output_view.setMinimumHeight(120)
        layout.addWidget(self.output_view)

    def _on_canvas_slider_changed(self, name: str, value: float) -> None:
        if set_slider_value(self.document, name, value) is not None:
            self.document.request_recompute(Recompute.SOFT)

    def _refresh_spin_boxes(self) -> None:
        for slider in self.document.sliders():
            spin = self.spin_boxes.get(slider.name)
            if spin is None or spin.value() == slider.value:
                continue
            spin.blockSignals(True)
            spin.setValue(slider.value)
            spin.blockSignals(False)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.session.close()
        super().closeEvent(event)


def main() -> None:
    output = ScriptOutput()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().addHandler(ScriptOutputHandler(output))

    app = QtWidgets.QApplication(sys.argv)

    document = build_demo_document()
    session = PanelSession(PanelConfig(), lambda: document)

    window = HostWindow(session, document, output)
    window.resize(360, 420)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
