"""Entry point; the CLI app is imported lazily so --help stays fast."""

import sys
from typing import cast


def main() -> int:
    from keyrace.cli.app import app

    return cast(int, app())


if __name__ == "__main__":
    sys.exit(main())
