"""Command-line interface for yamcp-dashboard."""
