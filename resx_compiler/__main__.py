"""Package entry point for ``python -m resx_compiler``.

WHY: Users run the tool as ``python -m resx_compiler`` for the
interactive wizard, or ``python -m resx_compiler --dogood`` for a full
batch regeneration. Python's ``-m`` flag executes this file.

HOW: Delegates to the CLI's main() function.
"""

from resx_compiler.cli import main

if __name__ == "__main__":
    main()
