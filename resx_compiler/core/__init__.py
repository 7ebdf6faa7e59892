"""Core chunk model, storage, rendering, and compilation modules.

WHY: The core package is the stable heart of the compiler: the chunk
model and its invariants, the source store, and the compiler that
projects chunks into artifacts.

HOW: model.py defines the data, storage.py and paths.py decide where
bytes live, markup.py renders trees, store.py mutates sources,
compiler.py writes artifacts through the formatters.

RULES:
- Nothing here prompts, prints, or exits; errors propagate to callers
- Configuration is passed in explicitly, never read from globals
"""
