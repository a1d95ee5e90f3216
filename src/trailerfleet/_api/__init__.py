"""Endpoint modules for the fleet backend API (internal)."""
