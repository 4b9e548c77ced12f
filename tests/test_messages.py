"""Tests for the message catalog."""

import json

from autoupdater.core.messages import MessageKey, Messages


def test_every_key_has_default_text():
    messages = Messages()
    for key in MessageKey:
        assert messages.localize(key)


def test_overrides_replace_defaults(tmp_path):
    path = tmp_path / 'messages.json'
    path.write_text(json.dumps({"DOWNLOADING": "Herunterladen", "NOPE": "x"}), encoding='utf-8')

    messages = Messages.load(str(path))

    assert messages(MessageKey.DOWNLOADING) == "Herunterladen"
    assert messages(MessageKey.VERIFYING) == "Verifying"


def test_no_file_gives_defaults():
    assert Messages.load("").localize(MessageKey.FAILED) == "Some mods failed to update."


def test_bad_file_gives_defaults(tmp_path):
    path = tmp_path / 'messages.json'
    path.write_text('["not", "an", "object"]', encoding='utf-8')

    assert Messages.load(str(path)).localize(MessageKey.REBOOT) == "Press Confirm to restart."
