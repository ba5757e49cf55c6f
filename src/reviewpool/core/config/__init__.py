"""Configuration for reviewpool."""
from .settings import ReviewPoolConfig, get_config, init_config

__all__ = [
    "ReviewPoolConfig",
    "get_config",
    "init_config",
]
