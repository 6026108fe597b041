import pytest

from portprobe import config
from portprobe.config import ScanConfig
from portprobe.errors import InvalidArgument


def test_defaults():
    c = ScanConfig()
    assert c.timeout_ms == config.TIMEOUT_MS == 1000
    assert c.max_threads == config.MAX_THREADS == 1000
    assert c.progress_every == 0


@pytest.mark.parametrize("kwargs", [{"timeout_ms": -1}, {"max_threads": 0}, {"progress_every": -5}])
def test_rejects_bad_values(kwargs):
    with pytest.raises(InvalidArgument):
        ScanConfig(**kwargs)


def test_zero_timeout_allowed():
    assert ScanConfig(timeout_ms=0).timeout_ms == 0


def test_pool_size_capped_by_ceiling(monkeypatch):
    monkeypatch.setattr(config.os, "cpu_count", lambda: 512)
    assert ScanConfig().pool_size() == config.POOL_CEILING


def test_pool_size_capped_by_cpus(monkeypatch):
    monkeypatch.setattr(config.os, "cpu_count", lambda: 8)
    assert ScanConfig().pool_size() == 8


def test_pool_size_capped_by_threads(monkeypatch):
    monkeypatch.setattr(config.os, "cpu_count", lambda: 64)
    assert ScanConfig(max_threads=3).pool_size() == 3


def test_pool_size_unknown_cpu_count(monkeypatch):
    monkeypatch.setattr(config.os, "cpu_count", lambda: None)
    assert ScanConfig().pool_size() == config.FALLBACK_CPU_COUNT


def test_rejects_timeout_beyond_poll_limit():
    assert ScanConfig(timeout_ms=config.MAX_TIMEOUT_MS).timeout_ms == config.MAX_TIMEOUT_MS
    with pytest.raises(InvalidArgument):
        ScanConfig(timeout_ms=config.MAX_TIMEOUT_MS + 1)
