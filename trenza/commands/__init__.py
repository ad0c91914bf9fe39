"""Command handlers for trenza."""
