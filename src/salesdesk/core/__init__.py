"""Core domain: sessions, permission resolution and role matrices."""
