"""Core filtering and formatting primitives.

The dispatcher and logger live in ``taglog.core.dispatcher`` and
``taglog.core.logger``; they depend on ``taglog.appenders`` and are not
imported here.
"""

from .events import LogEvent
from .formatters import LogFormat, format_from_string, get_formatter
from .levels import LogLevel, coerce_level
from .taglist import TagLevel, TagList

__all__ = [
    "LogEvent",
    "LogFormat",
    "LogLevel",
    "TagLevel",
    "TagList",
    "coerce_level",
    "format_from_string",
    "get_formatter",
]
