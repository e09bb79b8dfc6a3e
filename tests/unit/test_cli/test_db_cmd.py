"""Unit tests for the `relationship-api db` CLI commands."""

from unittest.mock import patch

from typer.testing import CliRunner

from relationship_api.cli.app import app

runner = CliRunner()

ENV = {"DATABASE_URL": "sqlite+aiosqlite://"}


class TestDbCommands:
    def test_upgrade_defaults_to_head(self) -> None:
        with patch("alembic.command.upgrade") as mock_upgrade:
            result = runner.invoke(app, ["db", "upgrade"], env=ENV)

        assert result.exit_code == 0
        assert mock_upgrade.call_args.args[1] == "head"

    def test_downgrade_one_step(self) -> None:
        with patch("alembic.command.downgrade") as mock_downgrade:
            result = runner.invoke(app, ["db", "downgrade"], env=ENV)

        assert result.exit_code == 0
        assert mock_downgrade.call_args.args[1] == "-1"

    def test_current_is_verbose(self) -> None:
        with patch("alembic.command.current") as mock_current:
            result = runner.invoke(app, ["db", "current"], env=ENV)

        assert result.exit_code == 0
        assert mock_current.call_args.kwargs == {"verbose": True}
