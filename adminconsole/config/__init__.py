"""Configuration module for the admin console."""
from .settings import ConsoleConfig, load_settings

__all__ = ["ConsoleConfig", "load_settings"]
