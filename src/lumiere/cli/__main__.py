"""CLI entry point for lumiere.cli module.

Enables execution via: python -m lumiere.cli
"""

from lumiere.cli.generate import main

if __name__ == "__main__":
    raise SystemExit(main())
