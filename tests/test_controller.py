"""Tests for the application controller and its action dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from tmxreview import config
from tmxreview.controller import (
    MSG_EXPORTED,
    MSG_EXPORTED_STRIPPED,
    MSG_LOADED,
    MSG_NOTHING_TO_EXPORT,
    MSG_NOTHING_TO_EDIT,
    MSG_START,
    AppController,
    EditTarget,
    ExportFile,
    LoadFile,
    LoadText,
)
from tmxreview.tmx_io import read_tmx_file

from conftest import SCENARIO_A


class Recorder:
    def __init__(self):
        self.messages: list[str] = []
        self.refreshes = 0

    def notify(self, message: str) -> None:
        self.messages.append(message)

    def refresh(self) -> None:
        self.refreshes += 1


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def controller(recorder: Recorder) -> AppController:
    return AppController(notify=recorder.notify, refresh=recorder.refresh)


class TestLoading:
    def test_start_message(self, controller: AppController, recorder: Recorder):
        assert recorder.messages == [MSG_START]
        assert controller.document is None
        assert controller.list_units() == []

    def test_load_file(self, controller: AppController, recorder: Recorder, small_tmx_path: Path):
        assert controller.on_user_action(LoadFile(small_tmx_path)) is True
        assert controller.session.file_name == "small.tmx"
        assert controller.status == MSG_LOADED
        assert recorder.refreshes == 1
        assert len(controller.list_units()) == 5

    def test_load_text(self, controller: AppController):
        assert controller.on_user_action(LoadText(SCENARIO_A, "a.tmx")) is True
        assert controller.list_units() == [("1", "Hello", "Bonjour")]

    def test_scenario_d_missing_root(self, controller: AppController, recorder: Recorder):
        assert controller.on_user_action(LoadText("<root><body/></root>")) is False
        assert controller.document is None
        assert controller.status == "Error loading TMX: Invalid TMX file: <tmx> not found."
        assert recorder.refreshes == 0

    def test_failed_load_keeps_previous_document(
        self, controller: AppController, small_tmx_path: Path, malformed_tmx_path: Path
    ):
        controller.load_file(small_tmx_path)
        doc = controller.document
        assert controller.load_file(malformed_tmx_path) is False
        assert controller.document is doc
        assert controller.session.file_name == "small.tmx"
        assert controller.status.startswith("Error loading TMX: Invalid XML")

    def test_missing_file(self, controller: AppController, tmp_path: Path):
        assert controller.load_file(tmp_path / "nope.tmx") is False
        assert controller.status.startswith("Error loading TMX: Could not read file")

    def test_new_load_replaces_document(self, controller: AppController, small_tmx_path: Path):
        controller.load_file(small_tmx_path)
        controller.load_text(SCENARIO_A, "other.tmx")
        assert controller.session.file_name == "other.tmx"
        assert len(controller.list_units()) == 1


class TestEditing:
    def test_edit_existing_target_no_refresh(
        self, controller: AppController, recorder: Recorder, small_tmx_path: Path
    ):
        controller.load_file(small_tmx_path)
        assert controller.on_user_action(EditTarget(0, "Salut")) is False
        assert recorder.refreshes == 1  # only the load
        assert controller.list_units()[0].target == "Salut"

    def test_edit_creating_variant_requests_refresh(
        self, controller: AppController, recorder: Recorder, small_tmx_path: Path
    ):
        controller.load_file(small_tmx_path)
        assert controller.on_user_action(EditTarget(2, "X")) is True
        assert recorder.refreshes == 2
        assert controller.list_units()[2].target == "X"

    def test_edit_without_document(self, controller: AppController, recorder: Recorder):
        assert controller.on_user_action(EditTarget(0, "X")) is False
        assert controller.status == MSG_NOTHING_TO_EDIT
        assert recorder.refreshes == 0

    def test_negative_row_edits_nothing(self, controller: AppController):
        controller.load_text(
            "<tmx><body><tu><tuv><seg>a</seg></tuv><tuv><seg>b</seg></tuv></tu>"
            "<tu><tuv><seg>c</seg></tuv></tu></body></tmx>"
        )
        with pytest.raises(IndexError):
            controller.on_user_action(EditTarget(-1, "Z"))
        assert controller.list_units() == [("1", "a", "b"), ("2", "c", "")]


class TestExporting:
    def test_export_to_directory_uses_file_name(
        self, controller: AppController, small_tmx_path: Path, tmp_path: Path
    ):
        controller.load_file(small_tmx_path)
        out = controller.on_user_action(ExportFile(tmp_path, strip_attributes=False))
        assert out == tmp_path / "small.tmx"
        assert controller.status == MSG_EXPORTED
        assert 'id="intro"' in out.read_text(encoding="utf-8")

    def test_export_to_file_path(self, controller: AppController, tmp_path: Path):
        controller.load_text(SCENARIO_A)
        out = controller.export(tmp_path / "chosen.tmx", strip_attributes=False)
        assert out == tmp_path / "chosen.tmx"
        assert read_tmx_file(out).list_units() == [("1", "Hello", "Bonjour")]

    def test_export_name_without_file_name(self, controller: AppController, tmp_path: Path):
        controller.load_text(SCENARIO_A)
        assert controller.export(tmp_path).name == "export.tmx"

    def test_export_name_gets_suffix(self, controller: AppController, tmp_path: Path):
        controller.load_text(SCENARIO_A, "memory.xml")
        assert controller.export(tmp_path).name == "memory.xml.tmx"

    def test_stripped_export_keeps_live_ids(self, controller: AppController, tmp_path: Path):
        controller.load_text('<tmx><body><tu id="7"><tuv><seg>a</seg></tuv></tu></body></tmx>')
        out = controller.export(tmp_path, strip_attributes=True)
        assert controller.status == MSG_EXPORTED_STRIPPED
        assert "id=" not in out.read_text(encoding="utf-8")
        assert controller.list_units()[0].unit_id == "7"

    def test_strip_default_from_config(self, controller: AppController, tmp_path: Path):
        config.set_strip_attributes(True)
        controller.load_text(SCENARIO_A)
        out = controller.on_user_action(ExportFile(tmp_path))
        assert controller.status == MSG_EXPORTED_STRIPPED
        assert 'id="1"' not in out.read_text(encoding="utf-8")

    def test_export_without_document(self, controller: AppController, tmp_path: Path):
        assert controller.export(tmp_path) is None
        assert controller.status == MSG_NOTHING_TO_EXPORT
        assert list(tmp_path.glob("*.tmx")) == []

    def test_export_failure_writes_nothing(self, controller: AppController, tmp_path: Path):
        controller.load_text(SCENARIO_A)
        controller.edit_target(0, "bad\x01")
        assert controller.export(tmp_path) is None
        assert controller.status.startswith("Error exporting TMX:")
        assert list(tmp_path.glob("*.tmx")) == []
        # The session stays usable
        controller.edit_target(0, "good")
        assert controller.export(tmp_path) == tmp_path / "export.tmx"


class TestDispatch:
    def test_unknown_action(self, controller: AppController):
        with pytest.raises(TypeError):
            controller.on_user_action("load")

    def test_callbacks_optional(self, tmp_path: Path):
        controller = AppController()
        assert controller.status == MSG_START
        controller.load_text(SCENARIO_A)
        assert controller.edit_target(0, "X") is False
