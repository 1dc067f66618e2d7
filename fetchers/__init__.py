"""Collectors that turn external content sources into raw trend mentions."""
