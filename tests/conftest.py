"""Shared fixtures: an in-memory canvas and an offscreen QApplication."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from paramctl_config import PanelConfig
from paramctl_host import MemoryComponent, MemoryDocument


@pytest.fixture()
def document() -> MemoryDocument:
    """Three tracked sliders plus some unrelated canvas objects."""
    doc = MemoryDocument([MemoryComponent("Circle"), MemoryComponent("topCircleX")])
    doc.add_slider("topCircleX", -10.0, 10.0, 3.2, decimal_places=2)
    doc.add_slider("topCircleY", 0.0, 20.0, 8.0, decimal_places=1)
    doc.add_slider("topCircleR", 0.1, 5.0, 1.5, decimal_places=2)
    doc.add_slider("untracked", 0.0, 1.0, 0.5, decimal_places=3)
    return doc


@pytest.fixture()
def config(tmp_path) -> PanelConfig:
    return PanelConfig.from_names(
        ["topCircleX", "topCircleY", "topCircleR"],
        preset_dir=tmp_path / "GH_Presets",
    )


@pytest.fixture(scope="session")
def qapp():
    from PyQt6 import QtWidgets

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app
