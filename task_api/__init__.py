# task_api/__init__.py
"""Task management REST API."""

__version__ = "1.0.0"
