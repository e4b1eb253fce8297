"""Shared test fixtures and configuration."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import numpy as np
import pytest
import trimesh

from readtrimesh.core import Config, RawMesh

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample mesh files."""
    return FIXTURES_DIR


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration."""
    return Config(
        loader={"scale": 1.0, "flags": []},  # leave file content untouched
        logging={"level": "WARNING", "colorize": False},
    )


@pytest.fixture
def sample_vertices() -> np.ndarray:
    """Vertices of the triangle stored in every sample file."""
    return np.array(
        [[-0.7, 2.1, 0.0], [1.4, 4.2, 0.0], [-3.5, 4.9, 0.0]],
        dtype=np.float32,
    )


@pytest.fixture
def sample_indices() -> np.ndarray:
    """Indices of the triangle stored in every sample file."""
    return np.array([[0, 1, 2]], dtype=np.uint32)


@pytest.fixture
def triangle_raw_mesh(sample_vertices: np.ndarray, sample_indices: np.ndarray) -> RawMesh:
    """Raw mesh with the sample triangle."""
    return RawMesh(vertices=sample_vertices, indices=sample_indices)


@pytest.fixture
def simple_box_mesh() -> trimesh.Trimesh:
    """Create a simple box mesh for testing."""
    return trimesh.creation.box(extents=[1, 1, 1])


@pytest.fixture
def box_stl_path(temp_dir: Path, simple_box_mesh: trimesh.Trimesh) -> Path:
    """Binary STL of a unit box, one vertex triple per face."""
    stl_path = temp_dir / "box.stl"
    simple_box_mesh.export(stl_path)
    return stl_path


# Markers for different test categories
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )
