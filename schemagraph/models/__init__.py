"""Configuration models."""

from schemagraph.models.builder_config import BuilderConfig
from schemagraph.models.loader import load_config

__all__ = ["BuilderConfig", "load_config"]
