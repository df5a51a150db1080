"""Entry point for ``python -m hypr_minimizer``."""

from .cli.commands import main


if __name__ == "__main__":
    main()
