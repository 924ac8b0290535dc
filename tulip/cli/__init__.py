"""Command line interface for Tulip."""
