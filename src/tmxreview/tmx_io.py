"""TMX text parser, serializer and exporter.

Uses lxml for the XML handling.  Parsed markup is converted into the typed
node tree of :mod:`tmxreview.models`; serializing rebuilds an lxml tree from
it, so everything outside ``<seg>`` edits (header, props, notes, inline
tags, comments) round-trips unchanged.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from lxml import etree

from tmxreview.errors import ExportError, ParseError
from tmxreview.identifiers import assign_missing_ids
from tmxreview.models import (
    ELEMENT_CLASSES,
    Comment,
    Element,
    Node,
    ProcessingInstruction,
    TmxDocument,
)
from tmxreview.models import strip_attributes as _strip_attributes

logger = logging.getLogger(__name__)

XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>\n'
DEFAULT_EXPORT_NAME = "export.tmx"

# ── Normalizing ─────────────────────────────────────────────────


def normalize_text(raw: str) -> str:
    """Drop one leading byte-order mark, then all leading whitespace."""
    if raw.startswith("\ufeff"):
        raw = raw[1:]
    return raw.lstrip()


# ── Parsing ─────────────────────────────────────────────────────


def _from_lxml(el: etree._Element, parent_nsmap: dict) -> Node | None:
    """Convert an lxml node (and its subtree) into a typed model node."""
    if isinstance(el, etree._Comment):
        return Comment(text=el.text or "", tail=el.tail)
    if isinstance(el, etree._ProcessingInstruction):
        return ProcessingInstruction(target=el.target, text=el.text, tail=el.tail)
    if not isinstance(el.tag, str):
        # Unresolved entity references and the like
        return None

    cls = ELEMENT_CLASSES.get(etree.QName(el).localname, Element)
    own_ns = {
        prefix: uri
        for prefix, uri in el.nsmap.items()
        if parent_nsmap.get(prefix) != uri
    }
    node = cls(
        tag=el.tag,
        attrib=dict(el.attrib),
        text=el.text,
        tail=el.tail,
        nsmap=own_ns,
    )
    for child in el:
        converted = _from_lxml(child, el.nsmap)
        if converted is not None:
            node.append(converted)
    return node


def parse_tmx_text(text: str) -> TmxDocument:
    """Parse normalized TMX text into a TmxDocument.

    Performs no repair: callers must run :func:`assign_missing_ids` before
    editing (see :func:`load_tmx_text`).

    Raises:
        ParseError: On malformed XML, or when the ``<tmx>`` root or its
            ``<body>`` is missing.
    """
    # The text is already decoded; make lxml ignore any declared encoding.
    parser = etree.XMLParser(encoding="utf-8", no_network=True)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)  # noqa: S320 - trusted local input
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise ParseError(f"Invalid XML: {exc}") from exc

    if etree.QName(root).localname != "tmx":
        raise ParseError("Invalid TMX file: <tmx> not found.")

    doctype = root.getroottree().docinfo.doctype or None
    doc = TmxDocument(root=_from_lxml(root, {}), doctype=doctype)
    if doc.body is None:
        raise ParseError("Invalid TMX file: <body> not found.")
    return doc


def load_tmx_text(raw: str) -> TmxDocument:
    """Normalize, parse and assign missing ids: a document ready for editing."""
    doc = parse_tmx_text(normalize_text(raw))
    assigned = assign_missing_ids(doc)
    logger.info("Loaded TMX: %d units, %d ids assigned", doc.unit_count(), assigned)
    return doc


def read_tmx_file(path: str | Path) -> TmxDocument:
    """Read a TMX file from disk and load it.

    Bytes are decoded as UTF-8 with replacement characters, so decoding
    itself never fails.

    Raises:
        ParseError: If the file cannot be read or is not a valid TMX document.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ParseError(f"Could not read file: {exc}") from exc
    return load_tmx_text(data.decode("utf-8", errors="replace"))


# ── Serializing ─────────────────────────────────────────────────


def _to_lxml(node: Node, parent: etree._Element | None = None) -> etree._Element:
    """Rebuild an lxml subtree from a typed node, attached to *parent*."""
    if isinstance(node, Comment):
        el = etree.Comment(node.text)
        parent.append(el)
    elif isinstance(node, ProcessingInstruction):
        el = etree.ProcessingInstruction(node.target, node.text)
        parent.append(el)
    else:
        nsmap = node.nsmap or None
        if parent is None:
            el = etree.Element(node.tag, nsmap=nsmap)
        else:
            # SubElement reuses the parent's prefixes for namespaced tags
            el = etree.SubElement(parent, node.tag, nsmap=nsmap)
        for name, value in node.attrib.items():
            el.set(name, value)
        el.text = node.text
        for child in node.children:
            _to_lxml(child, el)
    if parent is not None:
        el.tail = node.tail
    return el


def serialize_tmx(doc: TmxDocument) -> str:
    """Return the document as TMX text with an XML prolog."""
    root = _to_lxml(doc.root)
    head = XML_PROLOG
    if doc.doctype:
        head += doc.doctype + "\n"
    return head + etree.tostring(root, encoding="unicode")


# ── Exporting ───────────────────────────────────────────────────


def export_tmx(doc: TmxDocument, *, strip_attributes: bool = False) -> str:
    """Serialize *doc* for export.

    With *strip_attributes*, a deep copy has every attribute removed from
    every element before serializing; *doc* itself is never modified.

    Raises:
        ExportError: If copying, stripping or serializing fails.
    """
    try:
        target = doc
        if strip_attributes:
            target = doc.copy()
            _strip_attributes(target.root)
        return serialize_tmx(target)
    except Exception as exc:
        raise ExportError(str(exc)) from exc


def export_filename(file_name: str | None) -> str:
    """Return the download name: *file_name* with a ``.tmx`` suffix ensured."""
    if not file_name:
        return DEFAULT_EXPORT_NAME
    if file_name.endswith(".tmx"):
        return file_name
    return file_name + ".tmx"


def write_export(text: str, path: str | Path, *, backup: bool = False) -> None:
    """Write exported TMX text to *path* atomically.

    Atomic write:
      1. Writes to a temporary file in the same directory.
      2. Uses os.replace() to atomically swap into place.
      3. If *backup* is True and the target file exists, creates a
         .bak copy before overwriting.

    Raises:
        ExportError: If the file cannot be written.
    """
    path = Path(path)
    try:
        _atomic_write(text.encode("utf-8"), path, backup=backup)
    except OSError as exc:
        raise ExportError(f"Could not write {path.name}: {exc}") from exc


def _atomic_write(data: bytes, path: Path, *, backup: bool) -> None:
    target_dir = path.parent
    target_dir.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=str(target_dir), suffix=".tmx.tmp")
    try:
        os.write(fd, data)
        os.close(fd)
        fd = -1  # mark as closed

        if backup and path.exists():
            bak_path = path.with_suffix(path.suffix + ".bak")
            shutil.copy2(str(path), str(bak_path))

        os.replace(tmp_path, str(path))
    except BaseException:
        if fd >= 0:
            os.close(fd)
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
