"""Allow running the service with `python -m app`."""

from app.server import cli

if __name__ == "__main__":
    cli()
