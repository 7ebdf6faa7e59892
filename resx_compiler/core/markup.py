"""Deterministic indentation and rendering of nested key/value trees.

WHY: All generated artifacts share one indentation style and one quoting
rule. Rendering them through a single stateless helper guarantees that
identical chunk data always yields byte-identical files, which is what
makes repeated full rebuilds idempotent.

HOW: Markup holds only the configured tab size. render_object() emits a
JavaScript object literal with JSON-quoted keys and values;
render_interface() emits a TypeScript type literal with ``string``
leaves. Both recurse for nested dicts, so any namespace depth works.

RULES:
- A tree is a dict whose values are either str (leaf) or another tree
- Key order is the dict's insertion order; nothing is sorted
- The opening brace is not indented (callers place it after ``=`` or ``:``)
- The closing brace sits at the caller's indentation level
- Empty trees render as ``{}``
- Strings are JSON-escaped with non-ASCII kept verbatim; U+2028/U+2029
  are escaped so the output is a valid script in every JS engine
"""

from __future__ import annotations

import json
from typing import Dict, Union

Tree = Dict[str, Union[str, "Tree"]]


class Markup:
    """Stateless renderer parameterized by tab width."""

    def __init__(self, tab_size: int = 4) -> None:
        if tab_size < 0:
            raise ValueError("tab_size must not be negative")
        self._tab = " " * tab_size

    @property
    def tab_size(self) -> int:
        return len(self._tab)

    def indent(self, level: int) -> str:
        return self._tab * level

    @staticmethod
    def quote(value: str) -> str:
        """Quote a string as a JSON/JavaScript string literal."""
        return (
            json.dumps(value, ensure_ascii=False)
            .replace("\u2028", "\\u2028")
            .replace("\u2029", "\\u2029")
        )

    def render_object(self, tree: Tree, level: int = 0) -> str:
        """Render a tree as a JavaScript object literal."""
        if not tree:
            return "{}"
        inner = self.indent(level + 1)
        members = []
        for key, value in tree.items():
            if isinstance(value, dict):
                rendered = self.render_object(value, level + 1)
            else:
                rendered = self.quote(value)
            members.append("{}{}: {}".format(inner, self.quote(key), rendered))
        return "{\n" + ",\n".join(members) + "\n" + self.indent(level) + "}"

    def render_interface(self, tree: Tree, level: int = 0) -> str:
        """Render a tree as a TypeScript type literal with string leaves."""
        if not tree:
            return "{}"
        inner = self.indent(level + 1)
        members = []
        for key, value in tree.items():
            if isinstance(value, dict):
                rendered = self.render_interface(value, level + 1)
            else:
                rendered = "string"
            members.append("{}{}: {};".format(inner, self.quote(key), rendered))
        return "{\n" + "\n".join(members) + "\n" + self.indent(level) + "}"

    @staticmethod
    def lines(*parts: str) -> str:
        """Join lines with ``\\n`` and end the text with exactly one newline."""
        return "\n".join(parts).rstrip("\n") + "\n"
