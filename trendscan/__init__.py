"""Command-line entry points for the trend scanner."""
