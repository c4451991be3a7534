"""Tests for --verbose/--quiet flags and Verbosity enum."""

import logging

import pytest
import typer
from typer.testing import CliRunner

from taskdown.cli.main import Verbosity, app, resolve_verbosity
from taskdown.logging_setup import setup_logging

runner = CliRunner()


class TestVerbosityEnum:
    def test_values(self) -> None:
        assert Verbosity.quiet == "quiet"
        assert Verbosity.normal == "normal"
        assert Verbosity.verbose == "verbose"


class TestResolveVerbosity:
    def test_default_is_normal(self) -> None:
        assert resolve_verbosity(verbose=False, quiet=False) == Verbosity.normal

    def test_verbose_flag(self) -> None:
        assert resolve_verbosity(verbose=True, quiet=False) == Verbosity.verbose

    def test_quiet_flag(self) -> None:
        assert resolve_verbosity(verbose=False, quiet=True) == Verbosity.quiet

    def test_mutually_exclusive(self) -> None:
        with pytest.raises(typer.BadParameter, match="mutually exclusive"):
            resolve_verbosity(verbose=True, quiet=True)


class TestVerbosityFlags:
    def _parse(self, tmp_path, *flags: str):
        return runner.invoke(
            app,
            [*flags, "--config", str(tmp_path / "s.json"), "parse", "--", "- [ ] x"],
        )

    def test_verbose_sets_debug(self, tmp_path) -> None:
        result = self._parse(tmp_path, "--verbose")
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_sets_error(self, tmp_path) -> None:
        result = self._parse(tmp_path, "-q")
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.ERROR

    def test_default_is_warning(self, tmp_path) -> None:
        self._parse(tmp_path)
        assert logging.getLogger().level == logging.WARNING

    def test_both_flags_rejected(self, tmp_path) -> None:
        result = self._parse(tmp_path, "-v", "-q")
        assert result.exit_code != 0


class TestSetupLogging:
    def test_writes_to_current_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(logging.DEBUG)
        logging.getLogger("taskdown.example").debug("scanning notes")
        assert "scanning notes" in capsys.readouterr().err

    def test_third_party_debug_filtered(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(logging.DEBUG)
        logging.getLogger("urllib3").debug("connection pool")
        logging.getLogger("urllib3").warning("retrying")
        err = capsys.readouterr().err
        assert "connection pool" not in err
        assert "retrying" in err
