import pytest

from image_finder import cli
from image_finder.models import ErrorKind, Failed, Found, ImageFormat, NotFound

JPEG_BYTES = b"\xff\xd8" + b"\x00" * 700


def test_parse_args_with_queries() -> None:
    args = cli.parse_args(["cute cat", "red fox"])
    assert args.queries == ["cute cat", "red fox"]


def test_parse_args_requires_source() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_parse_args_raw_requires_single_query() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["a", "b", "--raw"])


def test_namespace_to_config_reads_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    agents = tmp_path / "agents.txt"
    agents.write_text("agent-one\nagent-two\n", encoding="utf-8")
    monkeypatch.setenv("IMAGE_FINDER_USER_AGENTS_FILE", str(agents))
    monkeypatch.setenv("IMAGE_FINDER_DEBUG", "1")
    config = cli.namespace_to_config(cli.parse_args(["cat", "--no-progress"]))
    assert config.user_agents == ("agent-one", "agent-two")
    assert config.debug is True
    assert config.show_progress is False


def test_main_returns_zero_when_all_found(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        cli,
        "run_pipeline",
        lambda config, logger: [(query, Found(JPEG_BYTES, ImageFormat.JPEG)) for query in config.queries],
    )
    assert cli.main(["cat"]) == 0
    assert "200 image/jpeg 'cat'" in capsys.readouterr().out


def test_main_returns_one_when_any_query_fails(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        cli,
        "run_pipeline",
        lambda config, logger: [
            ("cat", NotFound("cat")),
            ("dog", Failed(ErrorKind.SERVICE_TIMEOUT, "timeout")),
        ],
    )
    assert cli.main(["cat", "dog", "--no-progress"]) == 1
    output = capsys.readouterr().out
    assert "404 IMAGE_NOT_FOUND 'cat'" in output
    assert "503 SERVICE_TIMEOUT 'dog'" in output


def test_main_returns_two_on_invalid_config() -> None:
    assert cli.main(["cat", "--workers", "0"]) == 2


def test_main_returns_two_on_empty_queries_file(tmp_path) -> None:
    empty = tmp_path / "queries.txt"
    empty.write_text("\n  \n", encoding="utf-8")
    assert cli.main(["--queries-file", str(empty)]) == 2
