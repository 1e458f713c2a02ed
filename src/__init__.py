"""Water report service."""
