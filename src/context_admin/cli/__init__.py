"""CLI module for Context Admin."""
