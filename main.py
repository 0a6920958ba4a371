# main.py
"""
Entry point when running from a checkout: `python main.py --list-only`.

The installed console script `translate-docs` calls the same function.
"""

from __future__ import annotations

from tdocs.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
