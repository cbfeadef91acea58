"""CLI commands for repochangelog."""
