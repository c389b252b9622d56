"""Sequential ``id`` assignment for translation units that lack one."""

from __future__ import annotations

import logging
import re

from tmxreview.models import TmxDocument

logger = logging.getLogger(__name__)

# Leading base-10 integer, read leniently ("12", " 7", "12abc")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _numeric_id(raw: str | None) -> int | None:
    """Return the integer value of an existing id, or None if it has none."""
    if not raw:
        return None
    match = _INT_PREFIX.match(raw)
    if match is None:
        return None
    return int(match.group(1))


def assign_missing_ids(doc: TmxDocument) -> int:
    """Give every ``<tu>`` without an ``id`` attribute the next free number.

    Numbering continues from the largest numeric id already present (or 0).
    Units with a non-numeric id keep it and do not affect the numbering;
    a newly assigned id may therefore equal such an id.

    Returns the number of ids assigned.
    """
    units = doc.units

    max_id = 0
    for tu in units:
        n = _numeric_id(tu.unit_id)
        if n is not None and n > max_id:
            max_id = n

    next_id = max_id
    assigned = 0
    for tu in units:
        if "id" not in tu.attrib:
            next_id += 1
            tu.attrib["id"] = str(next_id)
            assigned += 1

    if assigned:
        logger.debug("Assigned %d ids (%d..%d)", assigned, max_id + 1, next_id)
    return assigned
