"""Command-line interface for the resource compiler.

WHY: The compiler runs in two ways: unattended in a build step ("do
everything GOOD") and interactively while a developer adds keys. The
CLI wires configuration, store, compiler, and wizard together behind
one command.

HOW: argparse accepts --config, --dogood, and --log-level. Logging is
configured with logging.basicConfig. Batch mode normalizes every source
chunk and then compiles all chunks; otherwise the interactive wizard
runs. The async pipeline is driven with asyncio.run(). Status messages
go to stderr.

RULES:
- --dogood/-d: full regeneration, no prompts
- Config errors exit with code 2, any other ResxError with code 1
- Success prints a completion summary to stderr
- argv=None means sys.argv; explicit argv is for tests
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from resx_compiler.config import DEFAULT_CONFIG_FILE, DEFAULT_LOG_LEVEL, ResxConfig, load_config
from resx_compiler.core.compiler import DistCompiler
from resx_compiler.core.storage import FileStorage, Storage
from resx_compiler.core.store import SourceChunkStore
from resx_compiler.errors import ConfigError, ResxError
from resx_compiler.interactive import InteractiveSession

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


async def generate_all(config: ResxConfig, storage: Optional[Storage] = None) -> None:
    """Normalize every source chunk, then compile every chunk.

    Raises:
        ResxError: On any store or compiler failure.
    """
    store = SourceChunkStore(config, storage or FileStorage())
    compiler = DistCompiler(config, store)

    _status("Normalizing sources in {}...".format(config.src_folder))
    rewritten = await store.normalize_all()
    for name in rewritten:
        _status("  Normalized: {}".format(name))

    _status("Compiling artifacts into {}...".format(config.dist_folder))
    report = await compiler.compile_all()
    for name in report.chunk_names:
        _status("  Compiled: {}".format(name))

    _status("")
    _status("Done! Compiled {} chunk(s), {} artifact(s).".format(
        len(report.chunk_names), report.artifact_count
    ))


async def run_interactive(config: ResxConfig) -> bool:
    store = SourceChunkStore(config, FileStorage())
    compiler = DistCompiler(config, store)
    return await InteractiveSession(config, store, compiler).run()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Kept separate from main() so tests can inspect the parser.
    """
    parser = argparse.ArgumentParser(
        prog="resx_compiler",
        description="Maintain translation chunks and compile them into JS runtime "
                    "objects, TypeScript declarations and flat prefixed key files.",
    )

    parser.add_argument(
        "-d", "--dogood",
        action="store_true",
        help="Do everything GOOD: normalize sources and regenerate all artifacts.",
    )

    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help="Path to the JSON configuration file (default: %(default)s).",
    )

    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m resx_compiler`` and the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        if args.dogood:
            asyncio.run(generate_all(config))
        elif not asyncio.run(run_interactive(config)):
            sys.exit(EXIT_FAILURE)
    except ResxError as e:
        logger.debug("Compilation failed", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
