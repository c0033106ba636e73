"""Carnes - installment booklet manager."""

__version__ = "0.1.0"
