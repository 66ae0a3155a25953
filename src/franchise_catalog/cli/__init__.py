"""
Franchise Catalog CLI

Command-line interface for serving and administering the catalog.
"""

from .main import cli

__all__ = ["cli", "main"]


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
