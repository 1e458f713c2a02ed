"""Repository layer for data access."""

from src.repositories.report_repository import ReportRepository
from src.repositories.customer_repository import CustomerRepository
from src.repositories.review_repository import ReviewRepository

__all__ = [
    "ReportRepository",
    "CustomerRepository",
    "ReviewRepository",
]
