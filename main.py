"""Convenience entry point to run the subtleshield CLI.

Allows running the command line with `python main.py ...` from the project root.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the src/ directory is on sys.path so `import subtleshield` works
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from subtleshield.frontend.cli.app import main


if __name__ == "__main__":
    sys.exit(main())
