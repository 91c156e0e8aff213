"""Module entrypoint for ``python -m symjump``.

All argument parsing and engine wiring happen in ``symjump.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
