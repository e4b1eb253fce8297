"""Run the readtrimesh CLI with ``python -m readtrimesh``."""

import sys
from typing import Optional

from readtrimesh.cli.app import app


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the readtrimesh CLI."""
    try:
        exit_code = app(argv, standalone_mode=False)
        return exit_code if isinstance(exit_code, int) else 0
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
