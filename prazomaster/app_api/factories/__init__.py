"""Factory helpers for building the application."""

from .build_app import build_prazo_app

__all__ = ["build_prazo_app"]
