"""Adapters for the backend, durable storage and navigation."""
