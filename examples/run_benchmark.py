"""Convenience wrapper for a quick engine comparison.

This script delegates to ``tplbench.cli`` so examples do not duplicate
orchestration logic.

Usage
-----
``python examples/run_benchmark.py``

``python examples/run_benchmark.py --set duration=5 --set style=all``
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Sequence

from tplbench.cli import main as tplbench_main

QUICK_CONFIG = Path(__file__).with_name("quick.yaml")


def main(argv: Sequence[str] | None = None) -> None:
    forwarded = list(sys.argv[1:] if argv is None else argv)
    raise SystemExit(tplbench_main(["run", "--config", str(QUICK_CONFIG), *forwarded]))


if __name__ == "__main__":
    main()
