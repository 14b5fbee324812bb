"""Shared services for the cart engine."""
