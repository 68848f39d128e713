"""Allow ``python -m zeptex``."""

from zeptex.cli import main

if __name__ == "__main__":
    main()
