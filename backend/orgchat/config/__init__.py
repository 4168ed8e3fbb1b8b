"""Configuration: environment settings and logging setup."""

from orgchat.config.settings import Config

__all__ = ["Config"]
