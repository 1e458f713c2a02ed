"""Database models."""

from src.models.report import Report
from src.models.customer import Customer
from src.models.review import Review

__all__ = [
    "Report",
    "Customer",
    "Review",
]
