"""Command line interface for better-debug."""
