"""Tests for the PyQt6 panel, run against an offscreen QApplication."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Tuple

import pytest

from paramctl_config import PanelConfig
from paramctl_gui import ParamWindow
from paramctl_host import MemoryDocument
from paramctl_session import PanelSession
from paramctl_sliders import find_slider, get_slider_value
from paramctl_sync import SyncState

pytestmark = pytest.mark.usefixtures("qapp")


@pytest.fixture()
def errors() -> List[Tuple[str, str]]:
    return []


@pytest.fixture()
def window(config: PanelConfig, document: MemoryDocument, errors, monkeypatch) -> ParamWindow:
    win = ParamWindow(config, document)
    monkeypatch.setattr(win, "_show_error", lambda title, msg: errors.append((title, msg)))
    yield win
    win.deleteLater()


class TestBuild:
    def test_one_row_per_found_slider_in_order(self, window: ParamWindow) -> None:
        assert list(window.rows) == ["topCircleX", "topCircleY", "topCircleR"]

    def test_missing_slider_row_is_omitted(self, config: PanelConfig, document: MemoryDocument) -> None:
        document.remove("topCircleY")
        win = ParamWindow(config, document)
        assert list(win.rows) == ["topCircleX", "topCircleR"]
        win.deleteLater()

    def test_row_is_scaled_to_host_precision(self, window: ParamWindow) -> None:
        row = window.rows["topCircleX"]
        assert row.slider.minimum() == -1000
        assert row.slider.maximum() == 1000
        assert row.position() == 320
        assert row.readout_text() == "3.20"

        row_y = window.rows["topCircleY"]
        assert (row_y.slider.minimum(), row_y.slider.maximum()) == (0, 200)
        assert row_y.readout_text() == "8.0"

    def test_window_chrome(self, window: ParamWindow) -> None:
        assert window.windowTitle() == "Parametric Controls"
        assert window.minimumWidth() == 460
        assert window.save_preset_button.text() == "Save Preset"
        assert window.load_preset_button.text() == "Load Preset"
        assert window.sync_button.text() == "Sync from GH"


class TestUserEdits:
    def test_dragging_a_row_writes_the_canvas(self, window: ParamWindow, document: MemoryDocument) -> None:
        window.rows["topCircleR"].slider.setValue(275)

        assert get_slider_value(document, "topCircleR") == 2.75
        assert window.rows["topCircleR"].readout_text() == "2.75"
        assert document.solution_count == 1


class TestSync:
    def test_sync_pulls_canvas_values_without_writing_back(
        self, window: ParamWindow, document: MemoryDocument
    ) -> None:
        find_slider(document, "topCircleX").set_value(-4.0)
        find_slider(document, "topCircleY").set_value(15.5)

        window.sync_button.click()

        assert window.rows["topCircleX"].position() == -400
        assert window.rows["topCircleX"].readout_text() == "-4.00"
        assert window.rows["topCircleY"].position() == 155
        assert window.engine.writes == 0
        assert document.solution_count == 0

    def test_sync_twice_is_stable(self, window: ParamWindow, document: MemoryDocument) -> None:
        find_slider(document, "topCircleR").set_value(3.33)
        window.sync_button.click()
        first = {n: (r.position(), r.readout_text()) for n, r in window.rows.items()}
        window.sync_button.click()
        second = {n: (r.position(), r.readout_text()) for n, r in window.rows.items()}
        assert first == second


class TestSavePreset:
    def test_save_creates_dir_and_appends_suffix(
        self, window: ParamWindow, config: PanelConfig, monkeypatch
    ) -> None:
        seen_dirs = []

        def ask(directory: Path) -> str:
            seen_dirs.append(directory)
            return str(directory / "shape")

        monkeypatch.setattr(window, "_ask_save_path", ask)
        window.save_preset_button.click()

        assert seen_dirs == [config.preset_dir]
        saved = config.preset_dir / "shape.json"
        assert json.loads(saved.read_text(encoding="utf-8")) == {
            "topCircleX": 3.2,
            "topCircleY": 8.0,
            "topCircleR": 1.5,
        }
        assert window.last_preset_path == saved

    def test_cancelled_dialog_writes_nothing(self, window: ParamWindow, config: PanelConfig, monkeypatch) -> None:
        monkeypatch.setattr(window, "_ask_save_path", lambda directory: "")
        window.save_preset_button.click()
        assert config.preset_dir.is_dir()
        assert list(config.preset_dir.iterdir()) == []

    def test_write_failure_is_reported(self, window: ParamWindow, tmp_path: Path, errors, monkeypatch) -> None:
        monkeypatch.setattr(window, "_ask_save_path", lambda directory: str(tmp_path / "no" / "such" / "dir"))
        window.save_preset_button.click()
        assert errors and errors[0][0] == "Error Saving Preset"


class TestLoadPreset:
    def test_load_applies_tracked_keys_once(
        self, window: ParamWindow, document: MemoryDocument, tmp_path: Path, monkeypatch
    ) -> None:
        path = tmp_path / "p.json"
        path.write_text(
            json.dumps({"topCircleX": -2.5, "topCircleR": 4.0, "untracked": 0.1, "old": 9}),
            encoding="utf-8",
        )
        monkeypatch.setattr(window, "_ask_open_path", lambda directory: str(path))

        window.load_preset_button.click()

        assert get_slider_value(document, "topCircleX") == -2.5
        assert get_slider_value(document, "topCircleR") == 4.0
        assert get_slider_value(document, "topCircleY") == 8.0
        assert get_slider_value(document, "untracked") == 0.5
        assert window.rows["topCircleX"].readout_text() == "-2.50"
        assert window.rows["topCircleR"].position() == 400
        assert document.solution_count == 1
        assert window.engine.writes == 0
        assert window.last_preset_path == path

    def test_malformed_file_changes_nothing(
        self, window: ParamWindow, document: MemoryDocument, tmp_path: Path, errors, monkeypatch
    ) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"topCircleX": 1.0, "topCircleR": "big"}', encoding="utf-8")
        monkeypatch.setattr(window, "_ask_open_path", lambda directory: str(path))

        window.load_preset_button.click()

        assert get_slider_value(document, "topCircleX") == 3.2
        assert window.rows["topCircleX"].readout_text() == "3.20"
        assert document.solution_count == 0
        assert errors and errors[0][0] == "Error Loading Preset"
        assert window.engine.guard.state is SyncState.IDLE

    def test_out_of_range_number_is_reported(
        self, window: ParamWindow, document: MemoryDocument, tmp_path: Path, errors, monkeypatch
    ) -> None:
        path = tmp_path / "huge.json"
        path.write_text('{"topCircleX": 1' + "0" * 400 + "}", encoding="utf-8")
        monkeypatch.setattr(window, "_ask_open_path", lambda directory: str(path))

        window.load_preset_button.click()

        assert errors and errors[0][0] == "Error Loading Preset"
        assert "out of range" in errors[0][1]
        assert get_slider_value(document, "topCircleX") == 3.2
        assert document.solution_count == 0

    def test_untracked_keys_are_logged_and_skipped(
        self, window: ParamWindow, document: MemoryDocument, tmp_path: Path, caplog, monkeypatch
    ) -> None:
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"topCircleY": 2.0, "untracked": 0.9, "old": 1}), encoding="utf-8")
        monkeypatch.setattr(window, "_ask_open_path", lambda directory: str(path))

        with caplog.at_level(logging.INFO, logger="paramctl_gui"):
            window.load_preset_button.click()

        assert "Ignoring 2 untracked preset key(s)" in caplog.messages
        assert get_slider_value(document, "topCircleY") == 2.0
        assert get_slider_value(document, "untracked") == 0.5

    def test_missing_file_is_reported(self, window: ParamWindow, tmp_path: Path, errors, monkeypatch) -> None:
        monkeypatch.setattr(window, "_ask_open_path", lambda directory: str(tmp_path / "gone.json"))
        window.load_preset_button.click()
        assert len(errors) == 1

    def test_cancelled_dialog_does_nothing(self, window: ParamWindow, document: MemoryDocument, errors, monkeypatch) -> None:
        monkeypatch.setattr(window, "_ask_open_path", lambda directory: "")
        window.load_preset_button.click()
        assert errors == []
        assert document.solution_count == 0


class TestSessionWithPanel:
    def test_single_panel_and_reopen_after_close(self, config: PanelConfig, document: MemoryDocument) -> None:
        session = PanelSession(config, lambda: document)

        session.run_script(True)
        first = session.window
        assert isinstance(first, ParamWindow)

        session.run_script(True)
        assert session.window is first

        first.close()
        assert not session.is_open()

        session.run_script(True)
        assert session.window is not first
        session.run_script(False)
        assert not session.is_open()


class TestHostWindow:
    def test_show_toggle_and_canvas_edits(self, config: PanelConfig) -> None:
        from paramctl_host import ScriptOutput
        from paramctl_main import HostWindow, build_demo_document

        document = build_demo_document()
        session = PanelSession(config, lambda: document)
        host = HostWindow(session, document, ScriptOutput())

        host.show_checkbox.setChecked(True)
        assert session.is_open()

        host.spin_boxes["topCircleR"].setValue(2.5)
        assert get_slider_value(document, "topCircleR") == 2.5
        assert document.solution_count == 1

        session.window.rows["topCircleR"].slider.setValue(125)
        assert host.spin_boxes["topCircleR"].value() == 1.25

        host.show_checkbox.setChecked(False)
        assert not session.is_open()
        host.deleteLater()
