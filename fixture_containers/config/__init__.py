"""Configuration package for fixture containers."""

from .image_config import ConfigValidationError, ImageConfig

__all__ = ['ConfigValidationError', 'ImageConfig']
