"""Command-line interface for gsuite-mcp."""
