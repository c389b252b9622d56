"""Exceptions raised by the TMX core."""

from __future__ import annotations


class TmxError(Exception):
    """Base class for errors surfaced to the user as a status message."""


class ParseError(TmxError):
    """The input is not well-formed XML, or lacks the ``<tmx>``/``<body>`` shape."""


class ExportError(TmxError):
    """Cloning, stripping, serializing or writing an export failed."""
