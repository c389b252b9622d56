"""Application controller: the single entry point for user actions.

UI code turns its events (file chosen, file dropped, target text typed,
export clicked) into one of the action objects below and hands it to
:meth:`AppController.on_user_action`.  The controller runs the core
operations synchronously and reports back through two callbacks: a status
message sink and a request to re-render the unit listing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union

from tmxreview import config
from tmxreview.errors import ExportError, ParseError
from tmxreview.models import TmxDocument, UnitRow
from tmxreview.session import EditSession
from tmxreview.tmx_io import load_tmx_text, read_tmx_file, write_export

logger = logging.getLogger(__name__)

MSG_START = "Open a TMX file to begin."
MSG_LOADED = "TMX loaded successfully."
MSG_EXPORTED = "TMX exported."
MSG_EXPORTED_STRIPPED = "TMX exported without attributes."
MSG_NOTHING_TO_EXPORT = "Nothing to export: no TMX loaded."
MSG_NOTHING_TO_EDIT = "Nothing to edit: no TMX loaded."


# ── Actions ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class LoadFile:
    path: str | Path


@dataclass(frozen=True)
class LoadText:
    """Raw file content already read by the UI (e.g. from a drop event)."""

    text: str
    file_name: str | None = None


@dataclass(frozen=True)
class EditTarget:
    row: int
    text: str


@dataclass(frozen=True)
class ExportFile:
    """Export to *destination*: a directory (default name) or a file path.

    ``strip_attributes=None`` uses the configured default.
    """

    destination: str | Path
    strip_attributes: bool | None = None


UserAction = Union[LoadFile, LoadText, EditTarget, ExportFile]


class AppController:
    """Owns the editing session and dispatches user actions to the core."""

    def __init__(
        self,
        notify: Callable[[str], None] | None = None,
        refresh: Callable[[], None] | None = None,
    ) -> None:
        self.session = EditSession()
        self.status = ""
        self._notify = notify
        self._refresh = refresh
        self._set_status(MSG_START)

    # ── Dispatch ────────────────────────────────────────────────

    def on_user_action(self, action: UserAction):
        if isinstance(action, LoadFile):
            return self.load_file(action.path)
        if isinstance(action, LoadText):
            return self.load_text(action.text, action.file_name)
        if isinstance(action, EditTarget):
            return self.edit_target(action.row, action.text)
        if isinstance(action, ExportFile):
            return self.export(action.destination, action.strip_attributes)
        raise TypeError(f"Unknown action: {action!r}")

    # ── Read side ───────────────────────────────────────────────

    @property
    def document(self) -> TmxDocument | None:
        return self.session.document

    def list_units(self) -> list[UnitRow]:
        return self.session.list_units()

    # ── Loading ─────────────────────────────────────────────────

    def load_file(self, path: str | Path) -> bool:
        """Load a TMX file.  On failure the current document is kept."""
        path = Path(path)
        try:
            doc = read_tmx_file(path)
        except ParseError as exc:
            return self._load_failed(exc)
        self._install(doc, path.name)
        return True

    def load_text(self, text: str, file_name: str | None = None) -> bool:
        try:
            doc = load_tmx_text(text)
        except ParseError as exc:
            return self._load_failed(exc)
        self._install(doc, file_name)
        return True

    def _install(self, doc: TmxDocument, file_name: str | None) -> None:
        self.session.install(doc, file_name)
        self._set_status(MSG_LOADED)
        self._request_refresh()

    def _load_failed(self, exc: ParseError) -> bool:
        logger.exception("Loading TMX failed")
        self._set_status(f"Error loading TMX: {exc}")
        return False

    # ── Editing ─────────────────────────────────────────────────

    def edit_target(self, row: int, text: str) -> bool:
        """Set a unit's target text.  Returns True if a ``<tuv>`` was created."""
        if not self.session.has_document:
            self._set_status(MSG_NOTHING_TO_EDIT)
            return False
        created = self.session.set_target_text(row, text)
        logger.debug("Row %d target set (new variant: %s)", row, created)
        if created:
            self._request_refresh()
        return created

    # ── Exporting ───────────────────────────────────────────────

    def export(
        self,
        destination: str | Path,
        strip_attributes: bool | None = None,
    ) -> Path | None:
        """Export the current document; return the written path or None."""
        if not self.session.has_document:
            self._set_status(MSG_NOTHING_TO_EXPORT)
            return None
        if strip_attributes is None:
            strip_attributes = config.get_strip_attributes()

        try:
            name, text = self.session.export(strip_attributes)
            path = Path(destination)
            if path.is_dir():
                path = path / name
            write_export(text, path, backup=True)
        except ExportError as exc:
            logger.exception("Exporting TMX failed")
            self._set_status(f"Error exporting TMX: {exc}")
            return None

        logger.info("Exported %s (strip attributes: %s)", path, strip_attributes)
        self._set_status(MSG_EXPORTED_STRIPPED if strip_attributes else MSG_EXPORTED)
        return path

    # ── Collaborators ───────────────────────────────────────────

    def _set_status(self, message: str) -> None:
        self.status = message
        if self._notify is not None:
            self._notify(message)

    def _request_refresh(self) -> None:
        if self._refresh is not None:
            self._refresh()
