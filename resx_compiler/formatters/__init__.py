"""Artifact formatter registry.

WHY: The compiler needs a single lookup of every artifact kind to emit.
A central dict makes adding a kind a one-line change here.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
The compiler instantiates each with the shared config and markup.

RULES:
- Keys are snake_case identifiers matching ArtifactKind values
- Values are BaseFormatter subclasses (not instances)
- Registration order is the order artifacts are rendered and written
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from resx_compiler.formatters.flat_file import FlatFileFormatter
from resx_compiler.formatters.runtime_object import RuntimeObjectFormatter
from resx_compiler.formatters.type_declaration import TypeDeclarationFormatter

if TYPE_CHECKING:
    from resx_compiler.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "runtime_object": RuntimeObjectFormatter,
    "type_declaration": TypeDeclarationFormatter,
    "flat_file": FlatFileFormatter,
}
