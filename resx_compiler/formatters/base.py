"""Abstract base formatter and artifact output container.

WHY: Every artifact kind consumes the same Chunk but produces different
file content. This base class enforces a consistent interface so the
compiler can run any formatter generically and add new kinds without
touching its own loop.

HOW: BaseFormatter is an ABC with a ``name`` property, a ``kind`` class
attribute, and a ``format()`` method. ArtifactOutput is a plain dataclass
bundling the rendered text with the (kind, language) pair the compiler
needs to resolve its destination path. build_key_tree() turns a chunk
into the nested tree the Markup renderer consumes.

RULES:
- ``format()`` returns a list: per-language formatters return one item
  per configured language, in configured order; language-invariant
  formatters return a single item with language None
- ``format()`` renders everything in memory and never writes files
- ``format()`` raises InvalidSourceDataError before returning anything
  if the chunk breaks the language-value invariants
- Formatters receive config and markup in the constructor, no globals
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from resx_compiler.config import ResxConfig
from resx_compiler.core.markup import Markup, Tree
from resx_compiler.core.model import ArtifactKind, Chunk
from resx_compiler.errors import InvalidSourceDataError

GENERATED_NOTICE = "Generated by resx_compiler. Do not edit."


@dataclass
class ArtifactOutput:
    """One rendered artifact.

    Attributes:
        kind: Artifact kind, used with ``language`` to resolve the path.
        language: Target language code, or None for language-invariant
                  artifacts (type declarations).
        content: The full file content.
        media_type: MIME type for the content.
    """

    kind: ArtifactKind
    language: Optional[str]
    content: str
    media_type: str


def ensure_valid(chunk: Chunk, default_lang: str) -> None:
    """Raise InvalidSourceDataError if any entry breaks the invariants."""
    problems = chunk.find_invalid_entries(default_lang)
    if problems:
        raise InvalidSourceDataError(chunk.name, "; ".join(problems))


def build_key_tree(
    chunk: Chunk,
    leaf: Callable[[str], str],
    delimiter: Optional[str] = None,
) -> Tree:
    """Build a nested tree of the chunk's keys.

    WHY: Runtime objects and type declarations both nest keys when a
    hierarchy delimiter is configured; flat files never do.

    HOW: Each key is split on ``delimiter`` (if any) and inserted path by
    path. ``leaf(key)`` supplies the leaf value for the full key.

    RULES:
    - No delimiter: the tree is flat, one leaf per key
    - A key that is both a leaf and a prefix of another key is invalid
    """
    tree: Tree = {}
    for key in chunk.entries:
        segments = key.split(delimiter) if delimiter else [key]
        node = tree
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise InvalidSourceDataError(
                    chunk.name, "key '{}' collides with key '{}'".format(key, segment)
                )
            node = child
        last = segments[-1]
        if last in node:
            raise InvalidSourceDataError(
                chunk.name, "key '{}' collides with a nested key group".format(key)
            )
        node[last] = leaf(key)
    return tree


class BaseFormatter(ABC):
    """Abstract base for all artifact formatters.

    To add a new artifact kind:
    1. Add a member to ArtifactKind and a path rule in PathResolver
    2. Create a new file in formatters/ and subclass BaseFormatter
    3. Register it in the FORMATTERS dict in formatters/__init__.py
    """

    kind: ArtifactKind

    def __init__(self, config: ResxConfig, markup: Optional[Markup] = None) -> None:
        self.config = config
        self.markup = markup or Markup(config.tab_size)

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Runtime object (JS)'."""

    @abstractmethod
    def format(self, chunk: Chunk) -> List[ArtifactOutput]:
        """Render the chunk into one or more artifacts.

        Raises:
            InvalidSourceDataError: If the chunk breaks the
                language-value invariants.
        """
