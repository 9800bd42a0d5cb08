"""Entry point for ``python -m pebble``."""

from pebble.cli import main

if __name__ == "__main__":
    main()
