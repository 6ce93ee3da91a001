"""quicksaver - rotating quicksave backups for Starfield."""

__version__ = "0.1.0"
