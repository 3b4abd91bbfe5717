"""Module entrypoint for ``python -m behindview``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and mode dispatch happen in ``behindview.cli``.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
