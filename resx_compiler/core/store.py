"""Source chunk store: canonical persistence and mutation of chunks.

WHY: Chunks are the only hand-maintained data in the system; every
artifact is derived from them. The store owns the source files and is
the single place that validates new keys, so a malformed chunk can only
come from a hand edit, never from the tool itself.

HOW: Each chunk is one UTF-8 JSON file (see PathResolver) holding
{key: {lang: value}}. Reads parse and validate the file with jsonschema
and return a Chunk. add_key() checks every precondition first, then
rewrites the whole file through the storage backend's atomic write.

RULES:
- Chunk names and key names are identifier-like; keys may additionally
  contain the configured keyDelimiter between identifier segments
- add_key() rejects duplicate keys, keys that collide with a nested
  key group, a missing default language, and empty values before
  anything is written
- read_chunk() applies the same name rules to hand-edited files, so a
  bad chunk or key name never reaches a formatter
- Files are always rewritten in full, never appended
- Serialized form: JSON indented by tab_size, non-ASCII kept, values
  ordered by configured language order (unknown languages last),
  trailing newline
- Unknown chunks raise NotFoundError; unparseable files raise
  InvalidSourceDataError
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

import jsonschema

from resx_compiler.config import ResxConfig
from resx_compiler.core.model import Chunk
from resx_compiler.core.paths import PathResolver
from resx_compiler.core.storage import FileStorage, Storage
from resx_compiler.errors import (
    AlreadyExistsError,
    InvalidSourceDataError,
    NotFoundError,
    ValidationError,
)
from resx_compiler.formatters.base import build_key_tree

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

SOURCE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "additionalProperties": {"type": "string"},
    },
}


class SourceChunkStore:
    """Reads, creates, and mutates chunk source files.

    WHY: The orchestrator needs existence checks, key lookups, and key
    insertion without knowing the file format or location.

    HOW: Paths come from PathResolver, bytes go through a Storage
    backend. The config is passed in explicitly and never read from
    global state.

    RULES:
    - All I/O methods are coroutines; await each before the next step
    - Single writer: no concurrent mutation is supported
    """

    def __init__(
        self,
        config: ResxConfig,
        storage: Optional[Storage] = None,
        paths: Optional[PathResolver] = None,
    ) -> None:
        self.config = config
        self.storage = storage or FileStorage()
        self.paths = paths or PathResolver(config, self.storage)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def chunk_exists(self, name: str) -> bool:
        return await self.storage.exists(self.paths.resolve_source_path(name))

    async def list_chunk_names(self) -> List[str]:
        return await self.paths.list_chunk_names_on_disk()

    async def read_chunk(self, name: str) -> Chunk:
        """Load and validate one chunk.

        Raises:
            NotFoundError: If the chunk has no source file.
            InvalidSourceDataError: If the file is not JSON, has the
                wrong shape, or uses a chunk or key name that cannot be
                emitted.
        """
        path = self.paths.resolve_source_path(name)
        if not await self.storage.exists(path):
            raise NotFoundError(name)
        try:
            validate_chunk_name(name)
        except ValidationError as e:
            raise InvalidSourceDataError(name, str(e)) from e

        text = await self.storage.read_text(path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidSourceDataError(name, "not valid JSON ({})".format(e)) from e

        try:
            jsonschema.validate(instance=data, schema=SOURCE_SCHEMA)
        except jsonschema.ValidationError as e:
            raise InvalidSourceDataError(name, e.message) from e

        for key in data:
            try:
                self.validate_key_name(key)
            except ValidationError as e:
                raise InvalidSourceDataError(name, str(e)) from e

        return Chunk(name=name, entries=data)

    async def read_default_language_entries(self, name: str) -> Dict[str, str]:
        chunk = await self.read_chunk(name)
        return chunk.default_language_entries(self.config.default_lang)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_empty_chunk(self, name: str) -> Chunk:
        """Create a chunk with no keys.

        Raises:
            ValidationError: If the name is not identifier-like.
            AlreadyExistsError: If a chunk with that name exists.
        """
        validate_chunk_name(name)
        if await self.chunk_exists(name):
            raise AlreadyExistsError(name)

        chunk = Chunk(name=name)
        await self._write_chunk(chunk)
        logger.info("Created chunk %s", name)
        return chunk

    async def add_key(self, chunk_name: str, key_name: str, language_values: Mapping[str, str]) -> Chunk:
        """Insert a new key into an existing chunk and rewrite its source.

        Args:
            chunk_name: Target chunk.
            key_name: New key; must not already exist in the chunk.
            language_values: language code → value; must contain the
                default language and no empty values.

        Returns:
            The updated Chunk.

        Raises:
            NotFoundError: If the chunk does not exist.
            ValidationError: On a bad or duplicate key, a missing default
                language value, or an empty value.
        """
        chunk = await self.read_chunk(chunk_name)

        self.validate_key_name(key_name)
        if key_name in chunk.entries:
            raise ValidationError("This key already exists: {}".format(key_name))
        self._check_key_group(chunk, key_name)
        self.validate_language_values(language_values)

        chunk.entries[key_name] = self._order_values(language_values)
        await self._write_chunk(chunk)
        logger.info("Added key %s to chunk %s", key_name, chunk_name)
        return chunk

    async def normalize_all(self) -> List[str]:
        """Rewrite every chunk in canonical form.

        Only files whose content changes are written.

        Returns:
            Names of the chunks that were rewritten.
        """
        rewritten: List[str] = []
        for name in await self.list_chunk_names():
            chunk = await self.read_chunk(name)
            for key, values in chunk.entries.items():
                chunk.entries[key] = self._order_values(values)
            path = self.paths.resolve_source_path(name)
            content = self.serialize(chunk)
            if await self.storage.read_text(path) != content:
                await self.storage.write_text(path, content)
                rewritten.append(name)
                logger.debug("Normalized chunk %s", name)
        return rewritten

    # ------------------------------------------------------------------
    # Validation and serialization
    # ------------------------------------------------------------------

    def validate_key_name(self, key_name: str) -> None:
        if not key_name:
            raise ValidationError("Key name must not be empty")
        delimiter = self.config.key_delimiter
        segments = key_name.split(delimiter) if delimiter else [key_name]
        for segment in segments:
            if not _IDENTIFIER_RE.fullmatch(segment):
                raise ValidationError("Invalid key name: {!r}".format(key_name))

    def _check_key_group(self, chunk: Chunk, key_name: str) -> None:
        """Reject a key that is a leaf on another key's path, or vice versa."""
        delimiter = self.config.key_delimiter
        if not delimiter:
            return
        entries = dict(chunk.entries)
        entries[key_name] = {}
        try:
            build_key_tree(Chunk(name=chunk.name, entries=entries), lambda key: key, delimiter)
        except InvalidSourceDataError as e:
            raise ValidationError(
                "Key {!r} collides with an existing key or key group".format(key_name)
            ) from e

    def validate_language_values(self, language_values: Mapping[str, str]) -> None:
        default_lang = self.config.default_lang
        if default_lang not in language_values:
            raise ValidationError(
                "Default language ({}) must be provided".format(default_lang)
            )
        for lang, value in language_values.items():
            if not isinstance(value, str) or not value:
                raise ValidationError("Can't add empty value for '{}'".format(lang))

    def _order_values(self, language_values: Mapping[str, str]) -> Dict[str, str]:
        ordered = {
            lang: language_values[lang]
            for lang in self.config.languages
            if lang in language_values
        }
        for lang, value in language_values.items():
            if lang not in ordered:
                ordered[lang] = value
        return ordered

    def serialize(self, chunk: Chunk) -> str:
        return json.dumps(chunk.entries, ensure_ascii=False, indent=self.config.tab_size) + "\n"

    async def _write_chunk(self, chunk: Chunk) -> None:
        await self.storage.write_text(self.paths.resolve_source_path(chunk.name), self.serialize(chunk))


def validate_chunk_name(name: str) -> None:
    """Raise ValidationError unless ``name`` can be a file stem and a JS property."""
    if not name or not _IDENTIFIER_RE.fullmatch(name):
        raise ValidationError(
            "Invalid resource name {!r}: use letters, digits and underscores".format(name)
        )
