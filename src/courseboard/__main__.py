"""Allow running as ``python -m courseboard``."""

from courseboard.cli import main

if __name__ == "__main__":
    main()
