"""Allow ``python -m stagegate`` from a pre-commit hook."""

from .cli import main

if __name__ == "__main__":
    main()
