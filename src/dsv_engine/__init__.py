"""UI-agnostic editing engine for delimiter-separated text tables."""

__all__ = [
    "adapters",
    "runtime",
    "table",
]

__version__ = "0.1.0"
