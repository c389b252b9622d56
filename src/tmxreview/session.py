"""The editing session: the one loaded document and its file name."""

from __future__ import annotations

from dataclasses import dataclass

from tmxreview.errors import ExportError
from tmxreview.models import TmxDocument, UnitRow
from tmxreview.tmx_io import export_filename, export_tmx


@dataclass
class EditSession:
    """Holds the current document; replaced wholesale on every load."""

    document: TmxDocument | None = None
    file_name: str | None = None

    @property
    def has_document(self) -> bool:
        return self.document is not None

    def install(self, doc: TmxDocument, file_name: str | None) -> None:
        self.document = doc
        self.file_name = file_name

    def list_units(self) -> list[UnitRow]:
        if self.document is None:
            return []
        return self.document.list_units()

    def set_target_text(self, row: int, text: str) -> bool:
        if self.document is None:
            raise LookupError("No TMX document loaded")
        return self.document.set_target_text(row, text)

    def export(self, strip_attributes: bool) -> tuple[str, str]:
        """Return ``(download name, TMX text)`` for the current document."""
        if self.document is None:
            raise ExportError("no TMX loaded")
        text = export_tmx(self.document, strip_attributes=strip_attributes)
        return export_filename(self.file_name), text
