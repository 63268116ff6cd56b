"""Pytest configuration and shared fixtures."""

import os

import pytest
from click.testing import CliRunner

from shpipe.cli import cli
from shpipe.config import (
    ENV_NO_GLOB,
    ENV_REAP_ALL,
    ENV_SEPARATOR_MATCH,
    ENV_VERBOSE,
)
from shpipe.stash import Stash


@pytest.fixture(autouse=True)
def clean_shpipe_env(monkeypatch):
    """Keep SHPIPE_* settings from the outer environment out of tests."""
    for name in (ENV_NO_GLOB, ENV_REAP_ALL, ENV_SEPARATOR_MATCH, ENV_VERBOSE):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_cwd(monkeypatch):
    """The cd built-in changes our own working directory; put it back."""
    monkeypatch.chdir(os.getcwd())


@pytest.fixture
def stash():
    """Provide a stash that is released after the test."""
    with Stash() as s:
        yield s


@pytest.fixture
def glob_dir(tmp_path, monkeypatch):
    """Provide a working directory with a few files for wildcard tests.

    Creates:
        a.txt, b.txt, c.log, sub/ (with sub/d.txt), .hidden.txt
    """
    (tmp_path / "a.txt").write_text("a\n")
    (tmp_path / "b.txt").write_text("bb\n")
    (tmp_path / "c.log").write_text("ccc\n")
    (tmp_path / ".hidden.txt").write_text("h\n")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "d.txt").write_text("d\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args.

    Usage:
        result = invoke(["run", "--capture", "echo", "hi"])
        result = invoke(["--no-glob", "expand", "*"])
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke
