from pathlib import Path

import pytest

from image_finder.config import FinderConfig
from image_finder.errors import ConfigError, InvalidQueryError
from image_finder.validation import (
    is_acceptable_image_url,
    is_supported_url,
    load_lines_from_file,
    validate_query,
    validate_runtime_constraints,
)


@pytest.mark.parametrize("query", ["", "   ", None])
def test_validate_query_rejects_missing(query: str | None) -> None:
    with pytest.raises(InvalidQueryError) as info:
        validate_query(query)
    assert info.value.code == "MISSING_QUERY"


def test_validate_query_length_bounds() -> None:
    assert validate_query("a" * 100) == "a" * 100
    assert validate_query("  cute cat  ") == "cute cat"
    with pytest.raises(InvalidQueryError) as info:
        validate_query("a" * 101)
    assert info.value.code == "QUERY_TOO_LONG"


def test_validate_query_rejects_forbidden_terms() -> None:
    with pytest.raises(InvalidQueryError) as info:
        validate_query("some NsFw pictures")
    assert info.value.code == "FORBIDDEN_QUERY"


def test_is_acceptable_image_url() -> None:
    assert is_acceptable_image_url("https://x.com/photo.jpg") is True
    assert is_acceptable_image_url("http://cdn.example.org/a/b.png?w=300") is True
    assert is_acceptable_image_url("https://x.com/logo.png") is False
    assert is_acceptable_image_url("data:image/png;base64,AAAA") is False
    assert is_acceptable_image_url("https://x.com/drawing.SVG") is False
    assert is_acceptable_image_url("https://x.com/ICON-small.jpg") is False
    assert is_acceptable_image_url("https://x.com/pixel_1x1.gif") is False
    assert is_acceptable_image_url("//x.com/photo.jpg") is False
    assert is_acceptable_image_url("ftp://x.com/photo.jpg") is False
    assert is_acceptable_image_url("") is False
    assert is_acceptable_image_url(None) is False


def test_is_supported_url() -> None:
    assert is_supported_url("https://example.com/a") is True
    assert is_supported_url("https:///nohost") is False


def test_validate_runtime_constraints_rejects_bad_values() -> None:
    base = dict(
        user_agents=("agent",),
        workers=1,
        search_timeout=5.0,
        download_timeout=10.0,
        alternative_timeout=15.0,
        max_attempts=3,
        backoff_ms=1000,
        min_image_bytes=512,
    )
    validate_runtime_constraints(**base)  # type: ignore[arg-type]
    for key, value in [
        ("user_agents", tuple()),
        ("workers", 0),
        ("search_timeout", 0),
        ("max_attempts", 0),
        ("backoff_ms", -1),
        ("min_image_bytes", -5),
    ]:
        with pytest.raises(ConfigError):
            validate_runtime_constraints(**{**base, key: value})  # type: ignore[arg-type]


def test_finder_config_validates_on_construction() -> None:
    assert FinderConfig().max_attempts == 3
    with pytest.raises(ConfigError):
        FinderConfig(user_agents=tuple())


def test_load_lines_from_file(tmp_path: Path) -> None:
    sample = tmp_path / "sample.txt"
    sample.write_text("one\n\n two \n", encoding="utf-8")
    assert load_lines_from_file(str(sample)) == ["one", "two"]
