"""
Entry point for running the CLI as a module.

Usage:
    python -m balance_prover
"""

from balance_prover.cli import main

if __name__ == "__main__":
    main()
