"""JavaScript runtime object formatter, one file per language.

WHY: Application code looks strings up at runtime through a global
namespace object. Only the current language's file is loaded, so each
language file fills the same ``<jsNamespace>.<currentLangNS>`` slot.

HOW: Builds the chunk's key tree with each key resolved for the target
language (falling back to the default language), renders it with
Markup.render_object(), and wraps it in an IIFE that creates the
namespace objects if they are missing.

RULES:
- One output per configured language, in configured order
- Missing language value → default-language value; never undefined
- Keys nested only when keyDelimiter is configured
- Output is a plain script (no module syntax); media type
  "application/javascript"
"""

from __future__ import annotations

from typing import List

from resx_compiler.core.markup import Tree
from resx_compiler.core.model import ArtifactKind, Chunk
from resx_compiler.formatters.base import (
    GENERATED_NOTICE,
    ArtifactOutput,
    BaseFormatter,
    build_key_tree,
    ensure_valid,
)

_GLOBAL_ROOT = 'typeof globalThis !== "undefined" ? globalThis : this'


class RuntimeObjectFormatter(BaseFormatter):
    """Formatter that produces per-language JavaScript lookup objects."""

    kind = ArtifactKind.RUNTIME_OBJECT

    @property
    def name(self) -> str:
        return "Runtime object (JS)"

    def format(self, chunk: Chunk) -> List[ArtifactOutput]:
        config = self.config
        ensure_valid(chunk, config.default_lang)

        outputs: List[ArtifactOutput] = []
        for language in config.languages:
            tree = build_key_tree(
                chunk,
                lambda key, lang=language: chunk.resolve_value(key, lang, config.default_lang),
                config.key_delimiter,
            )
            outputs.append(
                ArtifactOutput(
                    kind=self.kind,
                    language=language,
                    content=self._render(chunk.name, tree),
                    media_type="application/javascript",
                )
            )
        return outputs

    def _render(self, chunk_name: str, tree: Tree) -> str:
        m = self.markup
        ns = self.config.js_namespace
        current = self.config.current_lang_ns
        body = m.indent(1)
        return m.lines(
            "// {}".format(GENERATED_NOTICE),
            "(function (root) {",
            "{}var ns = root.{ns} = root.{ns} || {{}};".format(body, ns=ns),
            "{}var lang = ns.{cur} = ns.{cur} || {{}};".format(body, cur=current),
            "{}lang.{} = {};".format(body, chunk_name, m.render_object(tree, 1)),
            "}})({});".format(_GLOBAL_ROOT),
        )
