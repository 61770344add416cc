"""Command-line interface for yotox."""
