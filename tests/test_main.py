"""Unit tests for modcatalog.__main__ module."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from modcatalog.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for the ``python -m modcatalog`` entry point."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_returns_cli_exit_code(self, exit_code: int) -> None:
        """Test the CLI exit code is passed through."""
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"modcatalog.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test a failing CLI import is reported and exits with 1."""
        with patch.dict("sys.modules", {"modcatalog.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "modcatalog CLI failed to start." in captured.err
        assert "ImportError:" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error."""

    def test_includes_versions(self, capsys: pytest.CaptureFixture) -> None:
        """Test Python and package versions are printed."""
        mock_version_module = MagicMock()
        mock_version_module.__version__ = "9.9.9"

        with patch.dict(sys.modules, {"modcatalog.__version__": mock_version_module}):
            _print_startup_error(ImportError("No module named 'rich'"))

        err = capsys.readouterr().err
        assert "Python version" in err
        assert "modcatalog version: 9.9.9" in err
        assert "ImportError: No module named 'rich'" in err

    def test_unknown_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test a missing version module is reported as unknown."""
        with patch.dict(sys.modules, {"modcatalog.__version__": None}):
            _print_startup_error(ImportError("boom"))

        assert "modcatalog version: <unknown>" in capsys.readouterr().err
