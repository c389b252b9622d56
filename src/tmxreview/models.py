"""Data models for the TMX review editor.

The loaded file is held as an explicit tree of typed nodes rather than a
live XML tree: ``TmxDocument`` owns the ``<tmx>`` root, whose ``Body``
holds ``TranslationUnit`` → ``TranslationUnitVariant`` → ``Segment``.
Everything else (``<header>``, ``<prop>``, ``<note>``, inline tags) is kept
as a generic ``Element`` so that export reproduces it unchanged.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Union


@dataclass(eq=False)
class Element:
    """A generic element node.

    ``tag`` uses Clark notation (``{uri}name``) when namespaced; ``nsmap``
    holds only the namespace declarations made on this element.
    """

    tag: str
    attrib: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    tail: str | None = None
    children: list[Node] = field(default_factory=list)
    nsmap: dict[str | None, str] = field(default_factory=dict, repr=False)

    @property
    def localname(self) -> str:
        if self.tag.startswith("{"):
            return self.tag.split("}", 1)[1]
        return self.tag

    def qualify(self, localname: str) -> str:
        """Return *localname* in the same namespace as this element."""
        if self.tag.startswith("{"):
            return self.tag.split("}", 1)[0] + "}" + localname
        return localname

    def append(self, child: Node) -> None:
        self.children.append(child)

    def find(self, kind: type) -> Node | None:
        for child in self.children:
            if isinstance(child, kind):
                return child
        return None

    def find_all(self, kind: type) -> list:
        return [child for child in self.children if isinstance(child, kind)]

    def iter(self) -> Iterator[Element]:
        """Depth-first walk over this element and all descendant elements."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def itertext(self) -> Iterator[str]:
        """Yield all text content, including the tails of children."""
        if self.text:
            yield self.text
        for child in self.children:
            if isinstance(child, Element):
                yield from child.itertext()
            if child.tail:
                yield child.tail


@dataclass(eq=False)
class Comment:
    text: str = ""
    tail: str | None = None


@dataclass(eq=False)
class ProcessingInstruction:
    target: str = ""
    text: str | None = None
    tail: str | None = None


Node = Union[Element, Comment, ProcessingInstruction]


@dataclass(eq=False)
class Segment(Element):
    """``<seg>``: the translatable text of one variant."""

    tag: str = "seg"

    @property
    def content(self) -> str:
        """Full text of the segment, inline children flattened."""
        return "".join(self.itertext())

    @content.setter
    def content(self, value: str) -> None:
        # Inline markup is not editable: replace it with plain text
        self.children.clear()
        self.text = value


@dataclass(eq=False)
class TranslationUnitVariant(Element):
    """``<tuv>``: one language's rendering of a unit."""

    tag: str = "tuv"

    @property
    def segment(self) -> Segment | None:
        return self.find(Segment)

    def ensure_segment(self) -> Segment:
        seg = self.segment
        if seg is None:
            seg = Segment(tag=self.qualify("seg"))
            self.append(seg)
        return seg

    @property
    def segment_text(self) -> str:
        seg = self.segment
        return seg.content if seg is not None else ""


@dataclass(eq=False)
class TranslationUnit(Element):
    """``<tu>``: one translatable item.

    Variants are positional: the first ``<tuv>`` is the source, the second
    the target.  Language attributes are not consulted.
    """

    tag: str = "tu"

    @property
    def unit_id(self) -> str | None:
        return self.attrib.get("id")

    @property
    def variants(self) -> list[TranslationUnitVariant]:
        return self.find_all(TranslationUnitVariant)

    def _variant_text(self, index: int) -> str:
        variants = self.variants
        if index < len(variants):
            return variants[index].segment_text
        return ""

    @property
    def source_text(self) -> str:
        return self._variant_text(0)

    @property
    def target_text(self) -> str:
        return self._variant_text(1)

    def new_variant(self, text: str) -> TranslationUnitVariant:
        """Append a new ``<tuv><seg>text</seg></tuv>`` as the last child."""
        tuv = TranslationUnitVariant(tag=self.qualify("tuv"))
        tuv.ensure_segment().content = text
        self.append(tuv)
        return tuv


@dataclass(eq=False)
class Body(Element):
    tag: str = "body"

    @property
    def units(self) -> list[TranslationUnit]:
        return self.find_all(TranslationUnit)


# Typed node classes, keyed by local tag name
ELEMENT_CLASSES: dict[str, type[Element]] = {
    "body": Body,
    "tu": TranslationUnit,
    "tuv": TranslationUnitVariant,
    "seg": Segment,
}


def _tag_namespace(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def strip_attributes(node: Node) -> set[str]:
    """Remove every attribute from *node* and all of its descendants.

    Namespace declarations go too, except those still needed by an element
    tag in the subtree.  Returns the namespaces those tags use.
    """
    if not isinstance(node, Element):
        return set()
    node.attrib.clear()
    used: set[str] = set()
    ns = _tag_namespace(node.tag)
    if ns is not None:
        used.add(ns)
    for child in node.children:
        used |= strip_attributes(child)
    node.nsmap = {prefix: uri for prefix, uri in node.nsmap.items() if uri in used}
    return used


class UnitRow(NamedTuple):
    """One listed unit: its id and its source/target text."""

    unit_id: str
    source: str
    target: str


@dataclass(eq=False)
class TmxDocument:
    """In-memory representation of one loaded TMX file."""

    root: Element
    doctype: str | None = None

    @property
    def body(self) -> Body | None:
        return self.root.find(Body)

    @property
    def units(self) -> list[TranslationUnit]:
        body = self.body
        return body.units if body is not None else []

    def copy(self) -> TmxDocument:
        """Return a fully independent deep copy of the document."""
        return copy.deepcopy(self)

    # ── Row access helpers ──────────────────────────────────────

    def unit_count(self) -> int:
        return len(self.units)

    def unit_at(self, row: int) -> TranslationUnit:
        if row < 0:
            raise IndexError(f"unit row out of range: {row}")
        return self.units[row]

    def list_units(self) -> list[UnitRow]:
        """Return ``(id, source, target)`` for every unit in document order."""
        return [
            UnitRow(tu.unit_id or "", tu.source_text, tu.target_text)
            for tu in self.units
        ]

    def set_target_text(self, row: int, text: str) -> bool:
        """Set the target (second variant) text of the unit at *row*.

        Returns True when a new ``<tuv>`` had to be created, i.e. the
        unit's shape changed and any rendering of it is stale.
        """
        tu = self.unit_at(row)
        variants = tu.variants
        if len(variants) >= 2:
            variants[1].ensure_segment().content = text
            return False
        if not variants:
            # Keep the edit in the target position
            tu.new_variant("")
        tu.new_variant(text)
        return True
