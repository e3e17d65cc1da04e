"""Library management: books, readers, borrowing, statistics, reservations and a console."""

__version__ = "0.1.0"
__all__ = ["models", "bst", "reservation", "library", "cli"]