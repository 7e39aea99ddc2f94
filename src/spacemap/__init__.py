"""spacemap - disk usage treemaps."""

__version__ = "0.1.0"
