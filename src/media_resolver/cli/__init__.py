"""Command line interface for media-resolver."""
