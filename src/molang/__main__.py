"""Allow ``python -m molang``."""

from molang.cli import main

if __name__ == "__main__":
    main()
