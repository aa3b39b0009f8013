"""Textual integration: grid adapter and the DataTable viewer."""

from .controller import GridUIHooks, TextualGridAdapter

__all__ = ["GridUIHooks", "TextualGridAdapter"]
