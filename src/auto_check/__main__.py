"""Allow ``python -m auto_check``."""

from auto_check.cli import main

if __name__ == "__main__":
    main()
