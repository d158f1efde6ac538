"""Application configuration."""

from notifaya.config.settings import AppConfig

__all__ = ["AppConfig"]
