"""Command-line entrypoint for the Japanese LaTeX style checker."""

from __future__ import annotations

from jtexlint.style_check.style_check import main

if __name__ == "__main__":
    raise SystemExit(main())
