"""Configuration management."""

from cmdwrap.config.loader import (
    get_config,
    load_config,
    reload_config,
    reset_config,
)
from cmdwrap.config.schema import CmdWrapConfig

__all__ = [
    "CmdWrapConfig",
    "get_config",
    "load_config",
    "reload_config",
    "reset_config",
]
