import pytest

from accounts.core.config import Settings


pytestmark = pytest.mark.unit


@pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("true", True), ("1", True)])
def test_debug_flag_is_parsed_from_environment(monkeypatch, raw, expected):
    monkeypatch.setenv("DEBUG", raw)

    assert Settings(_env_file=None).DEBUG is expected


def test_debug_defaults_to_off(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)

    assert Settings(_env_file=None).DEBUG is False
