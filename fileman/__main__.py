"""Module entrypoint for ``python -m fileman``.

All argument parsing and runtime setup happen in ``fileman.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
