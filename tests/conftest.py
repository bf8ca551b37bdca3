"""Pytest configuration and shared fixtures."""

import logging
import tempfile
from pathlib import Path

import pytest

from schemagraph.core.builder import SchemaGraphBuilder
from schemagraph.handlers.registry import default_registry
from schemagraph.models.builder_config import BuilderConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def registry():
    """A fresh registry with the built-in handlers."""
    return default_registry()


@pytest.fixture
def builder(registry):
    """A builder over a fresh registry and default configuration."""
    return SchemaGraphBuilder(registry=registry, config=BuilderConfig())


@pytest.fixture
def cache():
    """An empty build cache shared by the builds of one test."""
    return {}


@pytest.fixture(autouse=True)
def propagate_schemagraph_logs():
    """Let caplog see records even after configure_logging replaced handlers."""
    logger = logging.getLogger("schemagraph")
    propagate = logger.propagate
    level = logger.level
    yield
    logger.handlers.clear()
    logger.propagate = propagate
    logger.setLevel(level)
