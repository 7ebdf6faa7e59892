"""Shared test fixtures for the resx_compiler test suite.

WHY: Most test modules need the same configuration, a store, and a
compiler wired to one storage backend. Centralizing fixtures here keeps
every test on the same two-language setup used in the docs.

HOW: Fixtures build a ResxConfig rooted in tmp_path, an in-memory
storage backend, and a store/compiler pair on top of it. Filesystem
tests request ``file_store`` instead. ``run`` executes a coroutine.

RULES:
- languages = ("en", "ru"), default "en", prefix "prefix"
- Namespace "Resx", current-language slot "Current", interface "ResxGlobal"
- Tab size 4
"""

import asyncio

import pytest

from resx_compiler.config import ResxConfig
from resx_compiler.core.compiler import DistCompiler
from resx_compiler.core.model import Chunk
from resx_compiler.core.storage import FileStorage, MemoryStorage
from resx_compiler.core.store import SourceChunkStore


def run(coro):
    """Run a coroutine to completion in a fresh event loop."""
    return asyncio.run(coro)


def make_config(tmp_path, **overrides):
    values = dict(
        src_folder=tmp_path / "src",
        dist_folder=tmp_path / "dist",
        resx_prefix="prefix",
        js_namespace="Resx",
        ts_glob_interface="ResxGlobal",
        languages=("en", "ru"),
        default_lang="en",
        current_lang_ns="Current",
        tab_size=4,
    )
    values.update(overrides)
    return ResxConfig(**values)


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(config, storage):
    return SourceChunkStore(config, storage)


@pytest.fixture
def compiler(config, store):
    return DistCompiler(config, store)


@pytest.fixture
def file_store(config):
    return SourceChunkStore(config, FileStorage())


@pytest.fixture
def greeting_chunk():
    """The two-key chunk from the fallback scenario: ``hello2`` has no ru value."""
    return Chunk(
        name="greeting",
        entries={
            "hello": {"en": "Hello", "ru": "Привет"},
            "hello2": {"en": "Bye"},
        },
    )
