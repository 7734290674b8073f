"""Stand-up summaries of recent commits, grouped by ticket."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("standupnote")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
