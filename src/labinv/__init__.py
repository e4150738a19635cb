"""labinv – laboratory inventory client."""

from loguru import logger

__all__ = ["logger"]
