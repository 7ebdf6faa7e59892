"""resx_compiler: localization resource compiler.

WHY: Translations are maintained as small JSON "chunks" (one per screen
or feature), but application code needs them as a runtime lookup
object, TypeScript declarations, and flat prefixed key files. Keeping
the three in sync by hand does not scale.

HOW: Three-stage pipeline: source store (chunks on disk), compiler
(one chunk or all), pluggable formatters (one per artifact kind).
Each stage is independently testable.

RULES:
- All formatters consume the same Chunk model
- Artifacts are derived and always regenerable; never edit them
- Adding an artifact kind = one new formatter module
"""

__version__ = "0.1.0"
