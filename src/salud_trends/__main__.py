"""Punto de entrada: python -m salud_trends."""

from __future__ import annotations

from salud_trends.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
