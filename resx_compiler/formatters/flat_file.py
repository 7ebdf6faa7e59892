"""Flat prefixed key file formatter, one file per language.

WHY: Server-side consumers read translations as flat ``key=value`` lines
where every key is globally unique. Prefixing with resxPrefix and the
chunk name keeps keys from different chunks apart.

HOW: For each configured language, emits one line per key in insertion
order: ``<resxPrefix>.<chunk>.<key>=<value>``, using the same
default-language fallback as the runtime object.

RULES:
- One output per configured language, in configured order
- Keys are never split; a delimiter inside a key stays in the line
- Backslash, CR and LF in values are escaped as \\\\, \\r and \\n so every
  entry stays on one line; other characters are written verbatim (UTF-8)
- First line is a ``#`` comment marking the file as generated
- Media type "text/x-java-properties"
"""

from __future__ import annotations

from typing import List

from resx_compiler.core.model import ArtifactKind, Chunk
from resx_compiler.formatters.base import (
    GENERATED_NOTICE,
    ArtifactOutput,
    BaseFormatter,
    ensure_valid,
)


def escape_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


class FlatFileFormatter(BaseFormatter):
    """Formatter that produces ``prefix.chunk.key=value`` files."""

    kind = ArtifactKind.FLAT_FILE

    @property
    def name(self) -> str:
        return "Flat prefixed file"

    def format(self, chunk: Chunk) -> List[ArtifactOutput]:
        config = self.config
        ensure_valid(chunk, config.default_lang)

        outputs: List[ArtifactOutput] = []
        for language in config.languages:
            lines = ["# {}".format(GENERATED_NOTICE)]
            for key in chunk.entries:
                value = chunk.resolve_value(key, language, config.default_lang)
                lines.append("{}.{}.{}={}".format(config.resx_prefix, chunk.name, key, escape_value(value)))
            outputs.append(
                ArtifactOutput(
                    kind=self.kind,
                    language=language,
                    content=self.markup.lines(*lines),
                    media_type="text/x-java-properties",
                )
            )
        return outputs
