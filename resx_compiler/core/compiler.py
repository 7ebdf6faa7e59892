"""Distribution compiler: projects chunks into every artifact kind.

WHY: Artifacts are pure projections of the source chunks. The tool needs
a full rebuild ("do everything") and a cheap single-chunk rebuild after
a chunk is created or a key is added. Both must produce the same bytes,
so they share one code path over an explicit set of chunk names.

HOW: compile_chunks() reads each chunk, runs every registered formatter
fully in memory, and only then writes the rendered artifacts through the
storage backend (each write atomic). compile_all() passes every chunk
name; compile_chunk() passes a singleton.

RULES:
- Artifacts of chunks outside the requested set are never touched
- A chunk that fails validation writes nothing at all
- Output is deterministic: keys in insertion order, languages in
  configured order, no timestamps
- The compile reason only changes log output
- Errors propagate to the caller; nothing is retried
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Type

from resx_compiler.config import ResxConfig
from resx_compiler.core.markup import Markup
from resx_compiler.core.model import Chunk, CompileReason
from resx_compiler.core.paths import PathResolver
from resx_compiler.core.store import SourceChunkStore
from resx_compiler.formatters import FORMATTERS
from resx_compiler.formatters.base import ArtifactOutput, BaseFormatter

logger = logging.getLogger(__name__)


@dataclass
class CompileReport:
    """Artifacts written by one compile call, grouped by chunk name."""

    written: Dict[str, List[Path]] = field(default_factory=dict)

    @property
    def chunk_names(self) -> List[str]:
        return list(self.written)

    @property
    def artifact_count(self) -> int:
        return sum(len(paths) for paths in self.written.values())


class DistCompiler:
    """Regenerates distribution artifacts for one or all chunks.

    WHY: The store owns the sources; this class exclusively owns the
    generated files under distFolder.

    HOW: Shares the store's storage backend and path resolver so both
    see the same files. Formatters are instantiated once with the shared
    config and Markup.

    RULES:
    - compile_all() and compile_chunk() both go through compile_chunks()
    - Rendering happens before any write for a given chunk
    """

    def __init__(
        self,
        config: ResxConfig,
        store: SourceChunkStore,
        formatters: Optional[Dict[str, Type[BaseFormatter]]] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.paths: PathResolver = store.paths
        markup = Markup(config.tab_size)
        registry = formatters if formatters is not None else FORMATTERS
        self.formatters: List[BaseFormatter] = [cls(config, markup) for cls in registry.values()]

    async def compile_all(self) -> CompileReport:
        names = await self.store.list_chunk_names()
        logger.info("Compiling all %d chunk(s)", len(names))
        return await self.compile_chunks(names)

    async def compile_chunk(self, name: str, reason: CompileReason = CompileReason.UPDATED) -> CompileReport:
        report = await self.compile_chunks([name])
        logger.info("Compiled %s chunk %s", CompileReason(reason).value, name)
        return report

    async def compile_chunks(self, names: Iterable[str]) -> CompileReport:
        """Compile exactly the given chunks.

        Raises:
            NotFoundError: If a named chunk does not exist.
            InvalidSourceDataError: If a chunk breaks the language-value
                invariants; that chunk's artifacts are left untouched.
            StorageError: If reading or writing fails.
        """
        report = CompileReport()
        for name in names:
            chunk = await self.store.read_chunk(name)
            rendered = self.render(chunk)
            written: List[Path] = []
            for output in rendered:
                path = self.paths.resolve_dist_path(chunk.name, output.language, output.kind)
                await self.store.storage.write_text(path, output.content)
                written.append(path)
            report.written[name] = written
            logger.debug("Wrote %d artifact(s) for chunk %s", len(written), name)
        return report

    def render(self, chunk: Chunk) -> List[ArtifactOutput]:
        """Render every artifact of a chunk in memory, in registry order."""
        outputs: List[ArtifactOutput] = []
        for formatter in self.formatters:
            for output in formatter.format(chunk):
                logger.debug(
                    "%s: rendered %s [%s] for chunk %s",
                    formatter.name, output.language or "all languages", output.media_type, chunk.name,
                )
                outputs.append(output)
        return outputs
