"""
Entry point for `python -m drillcore`.
"""
from drillcore.delivery.cli import main

if __name__ == "__main__":
    main()
