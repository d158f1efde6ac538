"""Notifaya — STX payment notification relay."""

__version__ = "0.1.0"
