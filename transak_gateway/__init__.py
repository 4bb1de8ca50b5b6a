"""Transak widget gateway: token exchange and widget URL creation."""
