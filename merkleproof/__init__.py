"""Command-line interface for merkleproof."""
