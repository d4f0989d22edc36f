"""Tests for the combined pre-build pipeline."""

from gallery_builder import pipeline
from gallery_builder.exceptions import FeedError
from gallery_builder.pipeline import build_steps, run_build
from gallery_builder.thumbnails import ThumbnailReport


def test_build_steps_follow_configuration(config):
    names = [name for name, _ in build_steps(config)]
    assert names == ["merge images", "merge articles", "merge profiles", "id hash map", "feeds", "thumbnails"]

    config.build.thumbnails = False
    assert "thumbnails" not in [name for name, _ in build_steps(config)]


def test_run_build_on_empty_project(config):
    report = run_build(config)

    assert report.ok
    details = {step.name: step.detail for step in report.steps}
    assert details["merge images"] == "skipped (missing directory)"
    assert details["feeds"] == "no articles"
    assert config.path("hash_map_output").exists()


def test_failing_step_does_not_stop_the_rest(config, monkeypatch):
    def broken_feeds(config):
        raise FeedError("disk full")

    monkeypatch.setattr(pipeline, "generate_feeds", broken_feeds)
    monkeypatch.setattr(pipeline, "generate_thumbnails", lambda config: ThumbnailReport(failed=["a.png"]))

    report = run_build(config)

    assert not report.ok
    failed = {step.name: step.detail for step in report.steps if not step.ok}
    assert failed == {"feeds": "disk full", "thumbnails": "1 thumbnails failed: a.png"}
    assert report.steps[-1].name == "thumbnails"


def test_merge_steps_report_entries(config, write_file):
    write_file(config.path("images_dir") / "a.json5", {"id": "a", "src": "/a.png"})
    config.build.thumbnails = False

    report = run_build(config)

    assert report.steps[0].detail == "1 entries from 1 files"
    assert run_build(config).steps[0].detail == "skipped (unchanged)"
    assert run_build(config, force=True).steps[0].detail == "1 entries from 1 files"


def test_skip_prebuild(config, monkeypatch):
    monkeypatch.setenv("GALLERY_SKIP_PREBUILD", "1")

    report = run_build(config)

    assert report.skipped
    assert report.steps == []
    assert not config.path("hash_map_output").exists()


def test_unexpected_step_error_does_not_stop_the_rest(config, monkeypatch, caplog):
    def broken_hash_map(config):
        raise ValueError("bad id")

    monkeypatch.setattr(pipeline, "generate_hash_map", broken_hash_map)
    config.build.thumbnails = False

    report = run_build(config)

    assert not report.ok
    failed = {step.name: step.detail for step in report.steps if not step.ok}
    assert failed == {"id hash map": "bad id"}
    assert [step.name for step in report.steps][-1] == "feeds"
    assert "failed unexpectedly" in caplog.text


def test_build_survives_undecodable_cache(config, write_file):
    write_file(config.path("images_dir") / "a.json5", {"id": "a", "src": "/a.png"})
    cache_file = config.cache_file("images")
    cache_file.parent.mkdir(parents=True, exist_ok=True)
    cache_file.write_bytes(b"\xff\xfe\x00garbage")
    config.build.thumbnails = False

    report = run_build(config)

    assert report.ok
    assert report.steps[0].detail == "1 entries from 1 files"
