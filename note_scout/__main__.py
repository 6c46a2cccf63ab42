"""Allow ``python -m note_scout``."""
from note_scout.cli import cli

if __name__ == "__main__":  # pragma: no cover
    cli()
