"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from blog_archiver import cli
from blog_archiver.errors import SurfaceLaunchError
from blog_archiver.models import JobResult


@pytest.fixture()
def recorded_batch(monkeypatch):
    calls = {}

    def fake_batch(urls, settings):
        calls["urls"] = urls
        calls["settings"] = settings
        return [JobResult(url=u, status="success", path=Path(f"/tmp/{i}.pdf"), size_bytes=10)
                for i, u in enumerate(urls)]

    monkeypatch.setattr(cli, "archive_batch", fake_batch)
    return calls


def test_no_urls_exits_non_zero(recorded_batch):
    assert cli.main([]) == 1
    assert "urls" not in recorded_batch


def test_only_invalid_urls_exit_non_zero(recorded_batch, capsys):
    assert cli.main(["not-a-url", "mailto:someone@example.com"]) == 1
    out = capsys.readouterr().out
    assert "Invalid URL 'not-a-url'" in out
    assert "No valid URLs to process" in out
    assert "urls" not in recorded_batch


def test_invalid_entries_are_reported_but_valid_ones_run(recorded_batch, capsys):
    assert cli.main(["https://a.example/post", "nope"]) == 0
    assert recorded_batch["urls"] == ["https://a.example/post"]
    assert "Invalid URL 'nope'" in capsys.readouterr().out


def test_options_reach_settings(recorded_batch, tmp_path):
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://b.example/\n# skipped\n", encoding="utf-8")

    cli.main([
        "https://a.example/", "--file", str(url_file), "--output", str(tmp_path / "out"),
        "--delay", "500", "--width", "1024", "--full-page", "--static",
    ])

    settings = recorded_batch["settings"]
    assert recorded_batch["urls"] == ["https://a.example/", "https://b.example/"]
    assert settings.output_dir == tmp_path / "out"
    assert settings.delay_ms == 500
    assert settings.width_override == 1024
    assert settings.full_page is True
    assert settings.static is True


def test_missing_url_file_exits_non_zero(recorded_batch, tmp_path):
    assert cli.main(["--file", str(tmp_path / "missing.txt")]) == 1


def test_surface_launch_failure_is_fatal(monkeypatch, capsys):
    def failing_batch(urls, settings):
        raise SurfaceLaunchError("Error starting browser")

    monkeypatch.setattr(cli, "archive_batch", failing_batch)

    assert cli.main(["https://a.example/"]) == 1
    assert "Error starting browser" in capsys.readouterr().out


def test_all_jobs_failing_exits_non_zero(monkeypatch):
    monkeypatch.setattr(
        cli, "archive_batch",
        lambda urls, settings: [JobResult(url=urls[0], status="failed", error="boom")],
    )
    assert cli.main(["https://a.example/"]) == 1
