"""TypeScript declaration formatter, one file per chunk.

WHY: TypeScript callers need to know which keys exist in the runtime
object. The shape is identical for every language, so a single
declaration per chunk is enough.

HOW: Each chunk's declaration re-opens the global interface named by
tsGlobInterface and adds one property for the chunk. TypeScript merges
all re-opened interfaces, so the global type grows as chunks are added.
The runtime namespace variable is declared with that interface as the
current-language slot; identical ``declare var`` statements in several
files are legal.

RULES:
- Exactly one output per chunk, language None
- Every key maps to ``string``; nested only when keyDelimiter is set
- Media type "application/typescript"
"""

from __future__ import annotations

from typing import List

from resx_compiler.core.model import ArtifactKind, Chunk
from resx_compiler.formatters.base import (
    GENERATED_NOTICE,
    ArtifactOutput,
    BaseFormatter,
    build_key_tree,
    ensure_valid,
)


class TypeDeclarationFormatter(BaseFormatter):
    """Formatter that produces a language-invariant ``.d.ts`` file."""

    kind = ArtifactKind.TYPE_DECLARATION

    @property
    def name(self) -> str:
        return "Type declaration (TS)"

    def format(self, chunk: Chunk) -> List[ArtifactOutput]:
        config = self.config
        ensure_valid(chunk, config.default_lang)

        tree = build_key_tree(chunk, lambda key: "string", config.key_delimiter)
        m = self.markup
        content = m.lines(
            "// {}".format(GENERATED_NOTICE),
            "interface {} {{".format(config.ts_glob_interface),
            "{}{}: {};".format(m.indent(1), m.quote(chunk.name), m.render_interface(tree, 1)),
            "}",
            "declare var {}: {{ {}: {} }};".format(
                config.js_namespace, config.current_lang_ns, config.ts_glob_interface
            ),
        )
        return [
            ArtifactOutput(
                kind=self.kind,
                language=None,
                content=content,
                media_type="application/typescript",
            )
        ]
