"""
Locale tree model.

A locale tree is the nested key -> value structure stored in every
``translation.json`` file. It is represented as a tagged union so that the
pipeline stages can pattern-match on node kinds instead of inspecting raw
JSON types:

- :class:`Branch` groups child nodes under string keys.
- :class:`PlainText` is the legacy leaf form, a bare string.
- :class:`AnnotatedText` is the current leaf form, ``{"text", "humanVerified"}``.
- :class:`OpaqueValue` wraps any other JSON value (arrays, numbers, booleans,
  null). Every transform passes it through unchanged.

Key paths are dotted concatenations of branch keys from the root to a leaf.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field

type KeyPath = str

TEXT_FIELD = "text"
VERIFIED_FIELD = "humanVerified"
PATH_SEPARATOR = "."


@dataclass(frozen=True, slots=True)
class PlainText:
    """Legacy leaf holding a bare translated string."""

    text: str


@dataclass(frozen=True, slots=True)
class AnnotatedText:
    """Leaf holding translated text plus its human-verification flag."""

    text: str
    human_verified: bool


@dataclass(frozen=True, slots=True)
class OpaqueValue:
    """Any non-string, non-object JSON value."""

    value: object


@dataclass(slots=True)
class Branch:
    """Nested grouping node. Child order is kept for diff-friendly output."""

    children: dict[str, Node] = field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return key in self.children

    def __len__(self) -> int:
        return len(self.children)

    def get(self, key: str) -> Node | None:
        return self.children.get(key)

    def copy(self) -> Branch:
        """Shallow copy: a new mapping that shares child nodes."""
        return Branch(dict(self.children))


type Leaf = PlainText | AnnotatedText | OpaqueValue
type Node = Branch | Leaf


def join_path(prefix: KeyPath, key: str) -> KeyPath:
    """Append a key to a dotted key path."""
    return f"{prefix}{PATH_SEPARATOR}{key}" if prefix else key


def is_annotated_record(value: object) -> bool:
    """
    Check whether a raw JSON object has the annotated leaf shape.

    The shape is exactly ``{"text": str, "humanVerified": bool}``; any extra
    key makes the object an ordinary branch.
    """
    if not isinstance(value, dict) or set(value) != {TEXT_FIELD, VERIFIED_FIELD}:  # pyright: ignore[reportUnknownArgumentType]
        return False
    return isinstance(value[TEXT_FIELD], str) and isinstance(value[VERIFIED_FIELD], bool)


def parse_node(value: object) -> Node:
    """Convert a JSON-compatible value into a tree node."""
    match value:
        case str():
            return PlainText(value)
        case dict() if is_annotated_record(value):  # pyright: ignore[reportUnknownArgumentType]
            return AnnotatedText(value[TEXT_FIELD], value[VERIFIED_FIELD])  # pyright: ignore[reportUnknownArgumentType]
        case dict():
            return parse_tree(value)  # pyright: ignore[reportUnknownArgumentType]
        case _:
            return OpaqueValue(value)


def parse_tree(data: Mapping[str, object]) -> Branch:
    """
    Convert a decoded JSON object into a :class:`Branch`.

    Args:
        data: Decoded JSON object

    Returns:
        Root branch of the locale tree
    """
    return Branch({str(key): parse_node(value) for key, value in data.items()})


def dump_node(node: Node) -> object:
    """Convert a tree node back into JSON-compatible data."""
    match node:
        case Branch():
            return dump_tree(node)
        case PlainText(text=text):
            return text
        case AnnotatedText(text=text, human_verified=verified):
            return {TEXT_FIELD: text, VERIFIED_FIELD: verified}
        case OpaqueValue(value=value):
            return value


def dump_tree(tree: Branch) -> dict[str, object]:
    """Convert a branch back into a JSON object, keeping key order."""
    return {key: dump_node(child) for key, child in tree.children.items()}


def iter_leaves(tree: Branch, prefix: KeyPath = "") -> Iterator[tuple[KeyPath, str, Leaf]]:
    """
    Walk every leaf depth-first in key order.

    Yields:
        Tuples of ``(key_path, key, leaf)``
    """
    for key, child in tree.children.items():
        path = join_path(prefix, key)
        match child:
            case Branch():
                yield from iter_leaves(child, path)
            case _:
                yield path, key, child


def flatten(tree: Branch) -> set[KeyPath]:
    """
    Collect the key path of every leaf in the tree.

    Any non-branch value terminates recursion, including annotated records,
    so a legacy tree and its upgraded form flatten to the same set. Empty
    branches contribute nothing.
    """
    return {path for path, _key, _leaf in iter_leaves(tree)}


def visit(tree: Branch, fn: Callable[[KeyPath, Leaf], None]) -> None:
    """Apply ``fn(key_path, leaf)`` to every leaf in the tree."""
    for path, _key, leaf in iter_leaves(tree):
        fn(path, leaf)


def count_leaves(tree: Branch) -> int:
    """Number of leaves in the tree."""
    return sum(1 for _ in iter_leaves(tree))


def leaf_text(leaf: Leaf) -> str | None:
    """Text of a translatable leaf, or None for opaque values."""
    match leaf:
        case PlainText(text=text) | AnnotatedText(text=text):
            return text
        case OpaqueValue():
            return None


def flatten_text(tree: Branch) -> dict[KeyPath, str]:
    """
    Build the flat ``key_path -> text`` lookup read by renderers.

    Plain and annotated leaves contribute their text; opaque values are
    left out.
    """
    lookup: dict[KeyPath, str] = {}
    for path, _key, leaf in iter_leaves(tree):
        text = leaf_text(leaf)
        if text is not None:
            lookup[path] = text
    return lookup


def get_path(tree: Branch, key_path: KeyPath) -> Node | None:
    """Resolve a dotted key path, returning None when any segment is absent."""
    node: Node = tree
    for key in key_path.split(PATH_SEPARATOR):
        if not isinstance(node, Branch) or key not in node:
            return None
        node = node.children[key]
    return node
