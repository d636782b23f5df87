from __future__ import annotations
import logging

import pytest

import u16fuzz.fuzzer as fuzzer_mod
from u16ans import CodecError, ErrorCode, decompress_u16
from u16fuzz import FuzzConfig
from u16fuzz.cli import main, parse_args


@pytest.fixture
def small_env(monkeypatch):
    monkeypatch.setenv("U16FUZZ_BUFFER_SIZE", "20000")
    monkeypatch.setenv("U16FUZZ_MAX_TEST_LOG", "10")


def test_config_defaults():
    cfg = FuzzConfig()
    assert cfg.buffer_size == (1 << 20) - 1
    assert cfg.max_test_size == 0x20000
    assert cfg.nb_tests == 32 * 1024
    assert cfg.table_log == 12 and cfg.check_degenerate


@pytest.mark.parametrize("kw", [
    {"max_test_size_mask": 1000},
    {"buffer_size": 100, "max_test_size_mask": 0xFF},
    {"table_log": 16},
    {"skew": 0.0},
    {"nb_tests": -1},
    {"update_rate_ms": -5},
])
def test_config_validation(kw):
    with pytest.raises(ValueError):
        FuzzConfig(**kw)


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("U16FUZZ_BUFFER_SIZE", "50000")
    monkeypatch.setenv("U16FUZZ_MAX_TEST_LOG", "12")
    monkeypatch.setenv("U16FUZZ_TABLE_LOG", "11")
    monkeypatch.setenv("U16FUZZ_SKEW", "0.1")
    monkeypatch.setenv("U16FUZZ_CHECK_DEGENERATE", "off")
    cfg = FuzzConfig.from_env()
    assert cfg.buffer_size == 50000 and cfg.max_test_size_mask == 0xFFF
    assert cfg.table_log == 11 and cfg.skew == 0.1
    assert cfg.check_degenerate is False


def test_parse_args_enumerated_flags():
    a = parse_args(["-s1234", "-i500", "-t20", "-v", "-p"])
    assert (a.seed, a.total, a.start, a.display_level, a.pause) == (1234, 500, 20, 4, True)
    a = parse_args([])
    assert a.seed is None and a.total == 32 * 1024 and a.start == 0 and a.display_level == 2


def test_parse_args_rejects_negative():
    with pytest.raises(SystemExit):
        parse_args(["-i", "-3"])


def test_main_success(small_env, caplog):
    caplog.set_level(logging.INFO)
    assert main(["-s1234", "-i12"]) == 0
    assert "Unit tests completed" in caplog.text
    assert "Fuzzer seed : 1234" in caplog.text
    assert "All 12 tests passed" in caplog.text


def test_main_resume_and_pause(small_env, monkeypatch, caplog):
    prompts = []
    monkeypatch.setattr("builtins.input", lambda msg="": prompts.append(msg) or "")
    caplog.set_level(logging.INFO)
    assert main(["-s1234", "-i12", "-t8", "-p"]) == 0
    assert prompts == ["press enter ...\n"]


def test_main_failure_exit_code(small_env, monkeypatch, caplog):
    def lax_decompress(dst, src):
        try:
            return decompress_u16(dst, src)
        except CodecError as e:
            if e.code != ErrorCode.DST_SIZE_TOO_SMALL:
                raise
            return len(dst)

    monkeypatch.setattr(fuzzer_mod, "decompress_u16", lax_decompress)
    caplog.set_level(logging.INFO)
    assert main(["-s1234", "-i24"]) == 1
    assert "Error => decompress_u16 should have failed" in caplog.text
    assert "(seed 1234, test nb" in caplog.text
    assert "tests passed" not in caplog.text


def test_main_default_seed(small_env, monkeypatch):
    monkeypatch.setattr("u16fuzz.cli.default_seed", lambda: 77)
    assert main(["-i3"]) == 0
