"""Module entrypoint for ``python -m filescram``.

All argument parsing and runtime setup happen in ``filescram.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
