"""Remind Me CLI実行用エントリポイント

Usage:
    python -m remind_me <command> [options]
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
