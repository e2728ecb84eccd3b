#!/usr/bin/env python3
"""``scalemask`` overlay pipeline runner.

Usage:
    python scripts/run_overlay.py maps/frame_001.png maps/frame_002.png
    python scripts/run_overlay.py maps/*.png --config scripts/user_config.py
    python scripts/run_overlay.py maps/*.png --reference legend.png -v

Note: User config in scripts/user_config.py, expert defaults in
src/scalemask/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from scalemask.cli.run_overlay import main


if __name__ == "__main__":
    sys.exit(main())
