"""
Entry point for running profile_keeper as a module.

Usage:
    python -m profile_keeper --list
"""

from .cli import run

if __name__ == "__main__":
    run()
