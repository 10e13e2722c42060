"""Shared pytest configuration for todoc tests."""

import textwrap

import pytest
from todoc.extractors import LuaParser

_ENV_VARS = ("TODOC_WORKSPACE", "TODOC_OUTPUT_DIR", "TODOC_STRICT", "TODOC_DEBUG", "DEBUG")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's TODOC_* settings out of the tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def parse():
    """Parse dedented Lua source text with a fresh LuaParser."""

    def _parse(source: str):
        text = textwrap.dedent(source).strip("\n")
        return LuaParser().parse_text(text, "test.lua")

    return _parse


@pytest.fixture
def write_source(tmp_path):
    """Write a dedented source file under tmp_path and return its path."""

    def _write(name: str, source: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
        return path

    return _write
