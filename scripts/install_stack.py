"""Provision the stack. Usage: APP_URL=http://web.localhost python scripts/install_stack.py"""

from __future__ import annotations

import sys
from pathlib import Path

from stackinit.cli import main

if __name__ == "__main__":
    sys.exit(main(start_dir=Path(__file__).resolve().parent))
