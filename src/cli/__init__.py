"""Strategy CLI - command-line front end for the strategy engine."""

__version__ = "0.1.0"
