"""Factory helpers for building the clearing application."""
from .build_app import build_clearing_app

__all__ = [
    "build_clearing_app",
]
