# proofing/tree.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from proofing.models import Segment

TEXT = "#text"
BREAK = "br"

# Container kinds that flow with surrounding text; any other kind is a block
INLINE_KINDS: FrozenSet[str] = frozenset(
    """
    span a b strong i em u s code mark small sub sup font label abbr cite q kbd
    var time del ins
    """.split()
)


@dataclass(eq=False)
class Node:
    """
    Generic structured-document node.

    `#text` nodes are leaves carrying text, `br` is a forced line break and
    every other kind is a container. Nodes compare by identity.
    """

    kind: str
    text: str = ""
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Node"] = field(default=None, repr=False)

    def __post_init__(self):
        for child in self.children:
            child.parent = self

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT

    @property
    def is_break(self) -> bool:
        return self.kind == BREAK

    def append(self, child: "Node") -> "Node":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "Node") -> None:
        for ix, existing in enumerate(self.children):
            if existing is child:
                del self.children[ix]
                child.parent = None
                return
        raise ValueError("node is not a child of this node")

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.remove(self)

    def to_dict(self) -> Dict[str, Any]:
        if self.is_text:
            return {"kind": TEXT, "text": self.text}
        return {"kind": self.kind, "children": [c.to_dict() for c in self.children]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        kind = data.get("kind", TEXT)
        if kind == TEXT:
            return cls(TEXT, text=data.get("text", ""))
        return cls(kind, children=[cls.from_dict(c) for c in data.get("children", [])])


def text_node(text: str) -> Node:
    return Node(TEXT, text=text)


def line_break() -> Node:
    return Node(BREAK)


def element(kind: str, *children: Node) -> Node:
    return Node(kind, children=list(children))


@dataclass
class TextMap:
    text: str
    segments: List[Segment]


def flatten(
    root: Node,
    inline_kinds: Iterable[str] = INLINE_KINDS,
    skip_kinds: Iterable[str] = (),
) -> TextMap:
    """
    Walk `root` depth first and build its flat text plus the segment map.

    Text leaves become real segments. A `br` becomes one synthetic newline.
    A block container starts with a synthetic newline unless it is at the very
    start or the previous segment is already one; after a block closes, the
    next real text is preceded by a newline on the same terms. The root
    itself never contributes a boundary.
    """
    inline = frozenset(inline_kinds)
    skip = frozenset(skip_kinds)
    segments: List[Segment] = []
    parts: List[str] = []
    offset = 0
    pending = False

    def after_newline() -> bool:
        return bool(segments) and segments[-1].synthetic and segments[-1].char == "\n"

    def boundary() -> None:
        nonlocal offset
        segments.append(Segment(offset, offset + 1, None, True, "\n"))
        parts.append("\n")
        offset += 1

    def walk(node: Node) -> None:
        nonlocal offset, pending
        if node.kind in skip:
            return

        if node.is_text:
            if not node.text:
                return
            if pending and offset > 0 and not after_newline():
                boundary()
            pending = False
            segments.append(Segment(offset, offset + len(node.text), node))
            parts.append(node.text)
            offset += len(node.text)
            return

        if node.is_break:
            boundary()
            pending = False
            return

        block = node.kind not in inline
        if block:
            if offset > 0 and not after_newline():
                boundary()
            pending = False
        for child in list(node.children):
            walk(child)
        if block:
            pending = True

    for child in list(root.children):
        walk(child)
    return TextMap("".join(parts), segments)


def find_segment_at(segments: List[Segment], offset: int) -> Optional[Segment]:
    """
    Real segment containing `offset` (end inclusive), or the first real
    segment after it when `offset` falls inside a synthetic run.
    """
    for seg in segments:
        if not seg.synthetic and seg.start <= offset <= seg.end:
            return seg
    for seg in segments:
        if not seg.synthetic and seg.start >= offset:
            return seg
    return None
