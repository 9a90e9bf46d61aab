"""Utility modules for mcpinstall."""
