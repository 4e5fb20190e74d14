"""Command-line interface for rts-agents."""
