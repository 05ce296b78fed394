"""Entry point for running the simulator.

Usage:
    python -m admissionsim 10 poisson 1000 uniform uniform 1000 4000
"""

from admissionsim.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
