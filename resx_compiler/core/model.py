"""Chunk data model and artifact/compile enumerations.

WHY: The store, the compiler, and every formatter pass chunks around.
A single typed representation keeps them agreeing on what a chunk is
and on how a value is resolved for a language.

HOW: Chunk is a dataclass holding a name and an insertion-ordered dict
of key → {language → value}. resolve_value() implements the fallback
rule shared by every per-language artifact. ArtifactKind and
CompileReason are str enums so they log and serialize cleanly.

RULES:
- entries preserves key insertion order (plain dict order)
- Every entry must carry the default language, and no value may be empty
- resolve_value() falls back to the default language, never to None
- Artifacts are pure projections of a Chunk; no other state feeds them
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List


class ArtifactKind(str, enum.Enum):
    """The generated output kinds produced for every chunk."""

    RUNTIME_OBJECT = "runtime_object"
    TYPE_DECLARATION = "type_declaration"
    FLAT_FILE = "flat_file"


class CompileReason(str, enum.Enum):
    """Why a single chunk is recompiled. Only affects logging."""

    CREATED = "created"
    UPDATED = "updated"


@dataclass
class Chunk:
    """One named group of translation keys.

    RULES:
    - name: unique chunk identifier, also the source file stem
    - entries: key → {language code → non-empty value}
    """

    name: str
    entries: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @property
    def keys(self) -> List[str]:
        return list(self.entries)

    def default_language_entries(self, default_lang: str) -> Dict[str, str]:
        """Project the chunk onto the default language.

        Entries lacking the default language are skipped; the compiler
        rejects such chunks separately via find_invalid_entries().
        """
        return {
            key: values[default_lang]
            for key, values in self.entries.items()
            if default_lang in values
        }

    def resolve_value(self, key: str, language: str, default_lang: str) -> str:
        """Return a key's value in ``language``, else its default-language value."""
        values = self.entries[key]
        value = values.get(language)
        if value:
            return value
        return values[default_lang]

    def find_invalid_entries(self, default_lang: str) -> List[str]:
        """List human-readable problems that break the language-value invariants."""
        problems: List[str] = []
        for key, values in self.entries.items():
            if not values.get(default_lang):
                problems.append(
                    "key '{}' has no value for default language '{}'".format(key, default_lang)
                )
            for lang, value in values.items():
                if lang != default_lang and not value:
                    problems.append("key '{}' has an empty '{}' value".format(key, lang))
        return problems
