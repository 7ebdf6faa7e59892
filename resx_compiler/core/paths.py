"""Source and distribution path resolution.

WHY: The store and the compiler both need to know where a chunk's source
file and each of its artifacts live. Centralizing the naming convention
here means the layout changes in one place.

HOW: Pure functions of the configuration, except list_chunk_names_on_disk()
which asks the storage backend for the source folder's listing.

RULES:
- Source:            <srcFolder>/<chunk>.json
- Runtime object:    <distFolder>/js/<lang>/<chunk>.js
- Type declaration:  <distFolder>/ts/<chunk>.d.ts (language ignored)
- Flat file:         <distFolder>/resx/<chunk>.properties for the default
                     language, <distFolder>/resx/<chunk>.<lang>.properties
                     for every other language
- Chunk names on disk are the sorted stems of *.json source files
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from resx_compiler.config import ResxConfig
from resx_compiler.core.model import ArtifactKind
from resx_compiler.core.storage import FileStorage, Storage

SOURCE_SUFFIX = ".json"


class PathResolver:
    """Computes file locations from the configuration."""

    def __init__(self, config: ResxConfig, storage: Optional[Storage] = None) -> None:
        self.config = config
        self.storage = storage or FileStorage()

    def resolve_source_path(self, chunk_name: str) -> Path:
        return self.config.src_folder / "{}{}".format(chunk_name, SOURCE_SUFFIX)

    def resolve_dist_path(self, chunk_name: str, language: Optional[str], kind: ArtifactKind) -> Path:
        dist = self.config.dist_folder
        if kind is ArtifactKind.RUNTIME_OBJECT:
            return dist / "js" / str(language) / "{}.js".format(chunk_name)
        if kind is ArtifactKind.TYPE_DECLARATION:
            return dist / "ts" / "{}.d.ts".format(chunk_name)
        if kind is ArtifactKind.FLAT_FILE:
            if language == self.config.default_lang:
                return dist / "resx" / "{}.properties".format(chunk_name)
            return dist / "resx" / "{}.{}.properties".format(chunk_name, language)
        raise ValueError("Unknown artifact kind: {}".format(kind))

    async def list_chunk_names_on_disk(self) -> List[str]:
        names = await self.storage.list_files(self.config.src_folder, SOURCE_SUFFIX)
        return [name[: -len(SOURCE_SUFFIX)] for name in names]
