"""salesdesk - session and permission resolution for the field-sales console."""

__version__ = "0.1.0"
