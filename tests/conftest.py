"""Shared pytest fixtures for channelsig tests."""

import pytest

from vectors import TEST_CHANNEL, TEST_PRIVATE_KEY


@pytest.fixture
def private_key():
    return TEST_PRIVATE_KEY


@pytest.fixture
def channel_address():
    return TEST_CHANNEL


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config and return its path."""
    def _write(text: str):
        path = tmp_path / "channelsig.yaml"
        path.write_text(text)
        return path
    return _write
