"""Status agents publishing TETU ecosystem metrics."""

__version__ = "0.1.0"
