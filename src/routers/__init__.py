"""API routers."""

from src.routers import health, ops, pages, reports

__all__ = ["health", "ops", "pages", "reports"]
