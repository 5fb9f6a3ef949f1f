"""Unified entry point for PocketBrain.

Configures logging from LOG_LEVEL and hands over to the CLI:

  python -m pocketbrain.main stats
  python -m pocketbrain.main daily "Shipped the sandbox fix"
  python -m pocketbrain.main config --refresh
"""

from pocketbrain.core.config import setup_logging
from pocketbrain.interfaces.cli.app import app


def main():
    """Main entry point."""
    setup_logging()
    app()


if __name__ == "__main__":
    main()
