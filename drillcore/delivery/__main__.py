"""
Entry point for running drillcore as a module.

Usage:
    python -m drillcore.delivery report
    python -m drillcore.delivery --help
"""
from .cli import main

if __name__ == "__main__":
    main()
