"""Tests for the command line interface."""

import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from cli import setup_logging
from cli.context import CLIContext
from cli.parser import app
from teamfeed.models.feed import CachedFeed

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    # Drop the handlers setup_logging installed
    for handler in list(root_logger.handlers):
        if type(handler) in (logging.FileHandler, logging.StreamHandler):
            handler.close()
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def cli_context(config, store, teamsnap):
    def build(**kwargs):
        return CLIContext(config=config, store=store, client=teamsnap, **kwargs)

    with patch("cli.parser.CLIContext", side_effect=build):
        yield


def test_setup_logging_levels(config):
    setup_logging(verbose=True, config=config)
    root_logger = logging.getLogger()
    file_handler, console_handler = root_logger.handlers
    assert file_handler.level == logging.DEBUG
    assert console_handler.level == logging.INFO
    assert (config.log_dir / config.log_filename).exists()

    setup_logging(quiet=True, config=config)
    assert len(root_logger.handlers) == 2
    assert root_logger.handlers[1].level == logging.ERROR

    setup_logging(config=config)
    assert root_logger.handlers[1].level == logging.WARNING


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("serve", "config", "teams", "invalidate"):
        assert command in result.output


def test_teams_not_authenticated(cli_context):
    result = runner.invoke(app, ["teams"])
    assert result.exit_code == 1


def test_teams(cli_context, authenticated, context):
    result = runner.invoke(app, ["teams", "--base-url", "https://feeds.example.com"])
    assert result.exit_code == 0, result.output
    assert "owner@example.com" in result.output
    assert context.registry.resolve(context.registry.token_for("Maple Leafs", "all")) is not None


def test_teams_access_denied(cli_context, authenticated, teamsnap):
    teamsnap.user = {"id": 1, "email": "intruder@example.com"}
    result = runner.invoke(app, ["teams"])
    assert result.exit_code == 1


def test_invalidate(cli_context, context):
    token = context.registry.token_for("Maple Leafs", "games")
    context.feed_cache.put(token, CachedFeed(ics_body="body", last_update=1))

    result = runner.invoke(app, ["invalidate", "42"])
    assert result.exit_code == 0, result.output
    assert context.feed_cache.get(token) is None


def test_invalidate_unknown_team(cli_context):
    result = runner.invoke(app, ["invalidate", "999"])
    assert result.exit_code == 1


def test_config(cli_context):
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0, result.output
    assert "Configuration" in result.output
    assert "TeamSnap Application" in result.output
    assert "OAuth Session" in result.output


def test_serve_runs_app(cli_context, config):
    with patch("flask.Flask.run") as mock_run:
        result = runner.invoke(app, ["serve", "--port", "9000"])
    assert result.exit_code == 0, result.output
    mock_run.assert_called_once_with(host=config.server_host, port=9000, debug=False)
