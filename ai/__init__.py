"""Completion service clients."""
