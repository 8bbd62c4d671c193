"""Package entry point for ``python -m narration_sync``.

WHY: Users run the tool as ``python -m narration_sync manifest.json``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates straight to the CLI's main() function.
"""

from narration_sync.cli import main

if __name__ == "__main__":
    main()
