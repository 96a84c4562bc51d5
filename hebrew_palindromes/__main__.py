"""Module entrypoint for running the CLI as ``python -m hebrew_palindromes``."""

from __future__ import annotations

from hebrew_palindromes.cli import main


if __name__ == "__main__":
    main()
