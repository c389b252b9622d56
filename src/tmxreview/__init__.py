"""TMX review editor: load, review, edit and re-export TMX files."""

__version__ = "0.1.0"
