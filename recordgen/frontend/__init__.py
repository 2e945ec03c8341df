"""Frontend package - converts Python source to a declaration tree."""

from .parse import ParseError, annotation_to_str, parse_module
from .sources import discover, load_sources, module_name_for, parse_sources

__all__ = [
    "ParseError",
    "annotation_to_str",
    "discover",
    "load_sources",
    "module_name_for",
    "parse_module",
    "parse_sources",
]
