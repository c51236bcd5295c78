"""
guidedflight - Guided projectile flight simulation

Entry point for running scenarios from a source checkout.

Usage:
    python main.py --list
    python main.py --preset vertical_test --csv flight.csv
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from guidedflight.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
