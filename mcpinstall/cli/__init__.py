"""Command-line interface for mcpinstall."""
