"""Lightbug API endpoint modules (internal)."""
