# txt2ics/__init__.py
# Keep this package lightweight; re-export the conversion entry points only.
from .interpret import interpret_line
from .icsbuild import EventBuilder
from .render import DocumentAssembler
from .main import convert, main

__version__ = "1.0.0"

__all__ = [
    "interpret_line",
    "EventBuilder",
    "DocumentAssembler",
    "convert",
    "main",
]
