# type: ignore
"""Membership service application package."""
