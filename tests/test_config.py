import pytest

from lyra_relevance.config import Config, _env_int


def test_env_int_default(monkeypatch):
    monkeypatch.delenv("LYRA_TEST_VALUE", raising=False)
    assert _env_int("LYRA_TEST_VALUE", 7) == 7
    monkeypatch.setenv("LYRA_TEST_VALUE", "  ")
    assert _env_int("LYRA_TEST_VALUE", 7) == 7


def test_env_int_override(monkeypatch):
    monkeypatch.setenv("LYRA_TEST_VALUE", "25")
    assert _env_int("LYRA_TEST_VALUE", 7) == 25


def test_env_int_invalid(monkeypatch):
    monkeypatch.setenv("LYRA_TEST_VALUE", "many")
    with pytest.raises(ValueError, match="LYRA_TEST_VALUE"):
        _env_int("LYRA_TEST_VALUE", 7)


def test_worker_count_is_capped():
    assert 0 < Config.num_workers <= 64
