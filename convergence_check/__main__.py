"""CLI entry point: python -m convergence_check"""

from convergence_check.cli import main

main()
