"""Command-line interface for RadioCore."""
