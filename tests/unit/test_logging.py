"""Unit tests for structured logging."""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from readtrimesh.core.config import LoggingConfig
from readtrimesh.core.mesh import PostProcessFlags
from readtrimesh.utils.logging import (
    StructuredLogger,
    get_logger,
    log_load_result,
    log_performance,
    setup_logging,
)


@pytest.fixture
def logging_config():
    """Create test logging configuration."""
    return LoggingConfig(
        level="INFO",
        format="json",
        colorize=False,
        add_caller_info=True,
    )


@pytest.fixture
def mock_mesh():
    """Create a stand-in for a loaded mesh."""
    mesh = MagicMock()
    mesh.vertex_count = 3
    mesh.face_count = 1
    mesh.flags = PostProcessFlags.default()
    return mesh


class TestLoggingSetup:
    """Test logging setup functionality."""

    def test_setup_logging_json(self, logging_config):
        logger = setup_logging(logging_config)

        assert logger is not None
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")

    @pytest.mark.parametrize("fmt", ["console", "plain"])
    def test_setup_logging_formats(self, fmt):
        logger = setup_logging(LoggingConfig(format=fmt, colorize=False))

        assert logger is not None

    def test_setup_logging_with_file(self, tmp_path: Path):
        log_file = tmp_path / "test.log"

        logger = setup_logging(LoggingConfig(), log_file=log_file)
        logger.info("test message", key="value")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["event"] == "test message"
        assert record["key"] == "value"

    def test_log_dir_creates_file(self, tmp_path: Path):
        config = LoggingConfig(log_dir=tmp_path / "logs", log_to_file=True)

        setup_logging(config)

        assert (tmp_path / "logs" / "readtrimesh.log").exists()

    def test_get_logger(self):
        logger = get_logger("test.module")

        assert logger is not None
        assert hasattr(logger, "info")
        assert hasattr(logger, "debug")


class TestLogHelpers:
    """Test logging helper functions."""

    def test_log_performance(self):
        logger = get_logger("test")

        with patch.object(logger, "info") as mock_info:
            log_performance(logger, "mesh_load", 0.25, vertices=3)

            mock_info.assert_called_once_with(
                "performance",
                operation="mesh_load",
                duration_ms=250.0,
                vertices=3,
            )

    def test_log_load_result_success(self, mock_mesh):
        logger = get_logger("test")

        with patch.object(logger, "info") as mock_info:
            log_load_result(logger, Path("/test/part.ply"), mesh=mock_mesh)

            mock_info.assert_called_once()
            call_args = mock_info.call_args
            assert call_args[0][0] == "load_success"
            assert call_args[1]["vertices"] == 3
            assert call_args[1]["flags"] == ["fix_internal_edges", "merge_duplicate_vertices"]

    def test_log_load_result_failure(self):
        logger = get_logger("test")

        with patch.object(logger, "error") as mock_error:
            log_load_result(logger, Path("/test/part.ply"), error=ValueError("bad face"))

            mock_error.assert_called_once()
            call_args = mock_error.call_args
            assert call_args[0][0] == "load_failed"
            assert call_args[1]["error"] == "bad face"
            assert call_args[1]["error_type"] == "ValueError"


class TestStructuredLogger:
    """Test StructuredLogger context manager."""

    def test_structured_logger_success(self):
        logger = get_logger("test")

        with patch.object(logger, "debug") as mock_debug, patch.object(logger, "info") as mock_info:
            with StructuredLogger(logger, "mesh_load", path="a.stl") as ctx:
                ctx.update_context(vertices=3)

            start_call = mock_debug.call_args
            assert start_call[0][0] == "mesh_load_started"
            assert start_call[1]["path"] == "a.stl"

            complete_call = mock_info.call_args
            assert complete_call[0][0] == "mesh_load_completed"
            assert "duration_ms" in complete_call[1]
            assert complete_call[1]["vertices"] == 3

    def test_structured_logger_failure(self):
        logger = get_logger("test")

        with patch.object(logger, "info") as mock_info, patch.object(logger, "error") as mock_error:
            with pytest.raises(ValueError):
                with StructuredLogger(logger, "mesh_load"):
                    raise ValueError("Test error")

            assert mock_info.call_count == 0
            assert mock_error.call_count == 1
            error_call = mock_error.call_args
            assert error_call[0][0] == "mesh_load_failed"
            assert error_call[1]["error"] == "Test error"
            assert error_call[1]["error_type"] == "ValueError"
            assert "duration_ms" in error_call[1]

    def test_structured_logger_update_context(self):
        logger = get_logger("test")

        with StructuredLogger(logger, "mesh_load", initial="value") as ctx:
            ctx.update_context(added="new_value", initial="updated")

            assert ctx.context["initial"] == "updated"
            assert ctx.context["added"] == "new_value"


class TestLogLevels:
    """Test different log levels."""

    def test_debug_level(self):
        setup_logging(LoggingConfig(level="DEBUG"))

        assert logging.getLogger().level == logging.DEBUG

    def test_error_level(self):
        setup_logging(LoggingConfig(level="ERROR"))

        assert logging.getLogger().level == logging.ERROR

    def test_library_logging_suppressed(self):
        setup_logging(LoggingConfig(level="DEBUG"))

        assert logging.getLogger("trimesh").level == logging.WARNING
        assert logging.getLogger("plyfile").level == logging.WARNING
