"""Utility modules for mediaxid."""
