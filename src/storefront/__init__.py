"""Storefront backend for a silver jewelry shop."""
