"""Stored order verification entry point."""

from .repository import OrderRepository
from .verifier import OrderTotalsVerifier, OrderVerificationService

__all__ = [
    "OrderRepository",
    "OrderTotalsVerifier",
    "OrderVerificationService",
]
