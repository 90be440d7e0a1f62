from __future__ import annotations

import pytest

from head import (
    Config,
    ConfigError,
    parse_args,
    parse_positive_int,
    preprocess_argv,
)


def test_parse_positive_int_accepts_positive_literals() -> None:
    assert parse_positive_int("3") == 3
    assert parse_positive_int("+7") == 7
    assert parse_positive_int("0010") == 10


@pytest.mark.parametrize(
    "text", ["foo", "0", "-1", "", " 3", "1.5", "1_0", "9" * 30, "5\n", "\u0663"]
)
def test_parse_positive_int_rejects_with_literal(text: str) -> None:
    with pytest.raises(ValueError) as excinfo:
        parse_positive_int(text)
    assert str(excinfo.value) == text


def test_defaults_read_ten_lines_from_stdin() -> None:
    config = parse_args([])
    assert config == Config(sources=("-",), line_count=10, byte_count=None)
    assert config.mode == "lines"


def test_sources_keep_order_and_duplicates() -> None:
    config = parse_args(["b.txt", "a.txt", "b.txt", "-"])
    assert config.sources == ("b.txt", "a.txt", "b.txt", "-")


def test_line_and_byte_options() -> None:
    assert parse_args(["-n", "3", "f"]).line_count == 3
    assert parse_args(["--lines=4"]).line_count == 4

    config = parse_args(["-c", "5", "f"])
    assert config.byte_count == 5
    assert config.mode == "bytes"
    assert parse_args(["--bytes", "6"]).byte_count == 6


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["-n", "0"], "illegal line count -- 0"),
        (["-n", "foo"], "illegal line count -- foo"),
        (["-n", "-5"], "illegal line count -- -5"),
        (["-c", "0"], "illegal byte count -- 0"),
        (["-c", "-1"], "illegal byte count -- -1"),
        (["--bytes", "1k"], "illegal byte count -- 1k"),
    ],
)
def test_bad_counts_name_flag_and_literal(argv: list, message: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_args(argv)
    assert str(excinfo.value) == message


def test_lines_and_bytes_conflict_before_validation() -> None:
    # Both values are invalid; the conflict is still what gets reported.
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["-n", "foo", "-c", "0"])
    assert "not allowed with" in str(excinfo.value)


def test_unknown_option_is_config_error() -> None:
    with pytest.raises(ConfigError):
        parse_args(["-x"])
    with pytest.raises(ConfigError):
        parse_args(["-n"])


def test_historical_number_syntax() -> None:
    assert preprocess_argv(["-20", "f"]) == ["-n", "20", "f"]
    assert preprocess_argv(["-c", "-1"]) == ["-c", "-1"]
    assert preprocess_argv(["--", "-3"]) == ["--", "-3"]
    assert parse_args(["-5", "f"]).line_count == 5


def test_config_is_read_only() -> None:
    config = parse_args([])
    with pytest.raises(AttributeError):
        config.line_count = 3


def test_newline_and_non_ascii_digits_are_illegal_counts() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["-n", "5\n"])
    assert str(excinfo.value) == "illegal line count -- 5\n"
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["-c", "\u0663"])
    assert str(excinfo.value) == "illegal byte count -- \u0663"


def test_config_rejects_invalid_values() -> None:
    with pytest.raises(TypeError):
        Config(sources="abc")
    with pytest.raises(ValueError):
        Config(line_count=0)
    with pytest.raises(ValueError):
        Config(byte_count=-1)
    assert Config(sources=[]).sources == ("-",)
