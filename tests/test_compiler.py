"""Tests for the distribution compiler.

WHY: The compiler is the only writer of generated files. Full and
incremental rebuilds must agree byte for byte, an incremental rebuild
must not touch other chunks, and a broken chunk must not leave a
half-written set of artifacts behind.

HOW: Chunks are created through the store (in-memory backend), compiled,
and the resulting storage dict is inspected. One class repeats the
end-to-end scenario on the real filesystem.

RULES:
- Paths follow PathResolver's layout (js/<lang>, ts, resx)
"""

import json
import logging

import pytest

from conftest import run
from resx_compiler.core.compiler import DistCompiler
from resx_compiler.core.model import CompileReason
from resx_compiler.errors import InvalidSourceDataError, NotFoundError


def _dist_files(storage, config):
    return {
        path: content
        for path, content in storage.files.items()
        if config.dist_folder in path.parents
    }


def _seed_greeting(store):
    run(store.create_empty_chunk("greeting"))
    run(store.add_key("greeting", "hello", {"en": "Hello", "ru": "Привет"}))
    run(store.add_key("greeting", "hello2", {"en": "Bye"}))


class TestCompileChunk:

    def test_writes_every_artifact(self, store, compiler, storage, config):
        _seed_greeting(store)
        report = run(compiler.compile_chunk("greeting", CompileReason.UPDATED))

        dist = config.dist_folder
        expected = {
            dist / "js" / "en" / "greeting.js",
            dist / "js" / "ru" / "greeting.js",
            dist / "ts" / "greeting.d.ts",
            dist / "resx" / "greeting.properties",
            dist / "resx" / "greeting.ru.properties",
        }
        assert set(_dist_files(storage, config)) == expected
        assert set(report.written["greeting"]) == expected
        assert report.artifact_count == 5

    def test_scenario_ru_flat_file(self, store, compiler, storage, config):
        _seed_greeting(store)
        run(compiler.compile_chunk("greeting", CompileReason.UPDATED))

        ru = storage.files[config.dist_folder / "resx" / "greeting.ru.properties"]
        assert "prefix.greeting.hello=Привет" in ru.splitlines()
        assert "prefix.greeting.hello2=Bye" in ru.splitlines()

    def test_newly_created_chunk_compiles_empty(self, store, compiler, storage, config):
        run(store.create_empty_chunk("fresh"))
        run(compiler.compile_chunk("fresh", CompileReason.CREATED))

        flat = storage.files[config.dist_folder / "resx" / "fresh.properties"]
        assert flat == "# Generated by resx_compiler. Do not edit.\n"

    def test_other_chunks_untouched(self, store, compiler, storage, config):
        _seed_greeting(store)
        run(store.create_empty_chunk("other"))
        run(store.add_key("other", "title", {"en": "Title"}))
        run(compiler.compile_all())

        # Simulate stale artifacts of "other" to prove they are not rewritten
        other_js = config.dist_folder / "js" / "en" / "other.js"
        storage.files[other_js] = "stale"
        before = {p: c for p, c in _dist_files(storage, config).items() if "other" in p.name}

        run(store.add_key("greeting", "hello3", {"en": "Hey"}))
        report = run(compiler.compile_chunk("greeting", CompileReason.UPDATED))

        after = {p: c for p, c in _dist_files(storage, config).items() if "other" in p.name}
        assert after == before
        assert report.chunk_names == ["greeting"]

    def test_reason_does_not_change_bytes(self, store, compiler, storage, config):
        _seed_greeting(store)
        run(compiler.compile_chunk("greeting", CompileReason.CREATED))
        created = dict(_dist_files(storage, config))
        run(compiler.compile_chunk("greeting", CompileReason.UPDATED))
        assert _dist_files(storage, config) == created

    def test_unknown_chunk(self, compiler):
        with pytest.raises(NotFoundError):
            run(compiler.compile_chunk("missing", CompileReason.UPDATED))


class TestCompileAll:

    def test_idempotent(self, store, compiler, storage, config):
        _seed_greeting(store)
        run(store.create_empty_chunk("other"))
        run(compiler.compile_all())
        first = dict(_dist_files(storage, config))

        run(compiler.compile_all())
        assert _dist_files(storage, config) == first

    def test_matches_incremental_output(self, store, storage, config):
        _seed_greeting(store)
        full = DistCompiler(config, store)
        run(full.compile_all())
        from_all = dict(_dist_files(storage, config))

        for path in list(from_all):
            del storage.files[path]
        run(full.compile_chunk("greeting", CompileReason.UPDATED))
        assert _dist_files(storage, config) == from_all

    def test_empty_store_writes_nothing(self, compiler, storage, config):
        report = run(compiler.compile_all())
        assert report.chunk_names == []
        assert _dist_files(storage, config) == {}

    def test_overwrites_hand_edited_artifacts(self, store, compiler, storage, config):
        _seed_greeting(store)
        run(compiler.compile_all())
        path = config.dist_folder / "ts" / "greeting.d.ts"
        original = storage.files[path]
        storage.files[path] = "edited by hand"

        run(compiler.compile_all())
        assert storage.files[path] == original


class TestInvalidSourceData:

    def test_no_artifacts_written_for_broken_chunk(self, compiler, storage, config):
        storage.files[config.src_folder / "broken.json"] = json.dumps(
            {"ok": {"en": "fine"}, "bad": {"ru": "нет"}}
        )
        with pytest.raises(InvalidSourceDataError):
            run(compiler.compile_chunk("broken", CompileReason.UPDATED))
        assert _dist_files(storage, config) == {}

    def test_broken_chunk_keeps_previous_artifacts(self, store, compiler, storage, config):
        _seed_greeting(store)
        run(compiler.compile_all())
        before = dict(_dist_files(storage, config))

        source = config.src_folder / "greeting.json"
        data = json.loads(storage.files[source])
        data["hello2"] = {"ru": "Пока"}
        storage.files[source] = json.dumps(data)

        with pytest.raises(InvalidSourceDataError):
            run(compiler.compile_all())
        assert _dist_files(storage, config) == before

    def test_non_identifier_chunk_file_compiles_nothing(self, compiler, storage, config):
        storage.files[config.src_folder / "my-screen.json"] = json.dumps({"hello": {"en": "Hi"}})
        with pytest.raises(InvalidSourceDataError):
            run(compiler.compile_all())
        assert _dist_files(storage, config) == {}

    def test_key_with_line_break_compiles_nothing(self, compiler, storage, config):
        storage.files[config.src_folder / "g.json"] = json.dumps({"a\nb=c": {"en": "T"}})
        with pytest.raises(InvalidSourceDataError):
            run(compiler.compile_chunk("g", CompileReason.UPDATED))
        assert _dist_files(storage, config) == {}


class TestLogging:

    def test_render_logs_formatter_and_media_type(self, store, compiler, caplog):
        _seed_greeting(store)
        with caplog.at_level(logging.DEBUG, logger="resx_compiler.core.compiler"):
            run(compiler.compile_chunk("greeting", CompileReason.UPDATED))

        messages = [record.getMessage() for record in caplog.records]
        assert "Runtime object (JS): rendered ru [application/javascript] for chunk greeting" in messages
        assert any("[text/x-java-properties]" in message for message in messages)


class TestFilesystemEndToEnd:

    def test_full_scenario_on_disk(self, file_store, config):
        compiler = DistCompiler(config, file_store)
        run(file_store.create_empty_chunk("greeting"))
        run(compiler.compile_chunk("greeting", CompileReason.CREATED))
        run(file_store.add_key("greeting", "hello", {"en": "Hello", "ru": "Привет"}))
        run(file_store.add_key("greeting", "hello2", {"en": "Bye"}))
        run(compiler.compile_chunk("greeting", CompileReason.UPDATED))

        ru = (config.dist_folder / "resx" / "greeting.ru.properties").read_text(encoding="utf-8")
        assert "prefix.greeting.hello=Привет\n" in ru
        assert "prefix.greeting.hello2=Bye\n" in ru

        js = (config.dist_folder / "js" / "ru" / "greeting.js").read_text(encoding="utf-8")
        assert '"hello2": "Bye"' in js

        first = {p: p.read_bytes() for p in config.dist_folder.rglob("*") if p.is_file()}
        run(compiler.compile_all())
        second = {p: p.read_bytes() for p in config.dist_folder.rglob("*") if p.is_file()}
        assert first == second
