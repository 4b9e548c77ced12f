"""Tests for download progress text."""

from autoupdater.core.progress import format_download_line, format_progress


def test_percentage_when_total_known():
    assert format_progress(500, 1000, 10) == "(50% @ 10 KiB/s)"


def test_percentage_rounds_down():
    assert format_progress(999, 1000, 3) == "(99% @ 3 KiB/s)"


def test_kib_count_when_total_unknown():
    assert format_progress(2500, 0, 5) == "(2KiB @ 5 KiB/s)"


def test_negative_total_uses_kib_count():
    assert format_progress(999, -1, 0) == "(0KiB @ 0 KiB/s)"


def test_download_line():
    line = format_download_line("[2/3] Auto-updating Foo:", "Downloading", 1, 4, 7)
    assert line == "[2/3] Auto-updating Foo: Downloading (25% @ 7 KiB/s)"
