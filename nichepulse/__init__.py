"""NichePulse: trending short-form video formats for creator niches."""

__version__ = "1.0.0"
