import json
import logging

import pytest

from core.config import DEFAULTS, config_paths, configure_logging, load_config, resolve_config_dir
from core.drafts import DraftCache
from core.errors import ValidationError
from core.models import BlogSummary, ContentDocument, DocumentStatus
from core.validation import (
    validate_delete_confirmation, validate_draft, validate_password, validate_publish,
)


def test_config_file_is_created_with_defaults(tmp_path):
    config = load_config(str(tmp_path))

    assert config == DEFAULTS
    assert json.loads((tmp_path / "config.json").read_text()) == DEFAULTS


def test_config_values_are_coerced(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"page_size": "24", "word_goal": "lots"}))

    config = load_config(str(tmp_path))

    assert config["page_size"] == 24
    assert config["word_goal"] == DEFAULTS["word_goal"]
    assert config["api_base_url"] == DEFAULTS["api_base_url"]


def test_config_dir_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("VIBEWRITE_HOME", str(tmp_path))
    assert resolve_config_dir() == str(tmp_path)
    assert resolve_config_dir("elsewhere") == "elsewhere"


def test_logging_goes_to_file_once(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        configure_logging(str(tmp_path))
        configure_logging(str(tmp_path))
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        logging.getLogger("core.test").warning("hello log")
        added[0].flush()
        assert "hello log" in (tmp_path / "vibewrite.log").read_text()
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
                h.close()


def test_draft_cache_round_trip(tmp_path):
    cache = DraftCache(config_paths(str(tmp_path))["draft"])
    doc = ContentDocument(title="Hi", body="Body", category="Web")
    doc.add_tag("Python")

    assert cache.save(doc)
    loaded = cache.load()

    assert (loaded.title, loaded.body, loaded.tags, loaded.category) == ("Hi", "Body", ("python",), "Web")
    assert "updatedAt" in json.loads(open(cache.path).read())

    cache.clear()
    assert not cache.exists()
    assert cache.load() is None


def test_corrupt_draft_is_ignored(tmp_path):
    path = tmp_path / "draft.json"
    path.write_text("{not json")
    assert DraftCache(str(path)).load() is None


def test_document_derivations():
    doc = ContentDocument(title="T", body="word " * 450)

    assert doc.word_count == 450
    assert doc.read_minutes() == 2
    assert doc.excerpt.endswith("...") and len(doc.excerpt) == 203
    payload = doc.to_payload(DocumentStatus.PENDING)
    assert payload["status"] == "pending"
    assert payload["category"] == "General"


def test_tags_are_trimmed_lowercased_and_unique():
    doc = ContentDocument()
    doc.set_tags_from_text(" Rust, rust ,, Web ")
    assert doc.tags == ("rust", "web")
    doc.remove_tag("RUST")
    assert doc.tags == ("web",)


def test_summary_from_api_clamps_counters():
    b = BlogSummary.from_api({"id": 7, "title": "x", "likeCount": -3, "views": "12",
                              "publishedAt": "2026-01-02T03:04:05Z"})
    assert (b.id, b.like_count, b.views) == ("7", 0, 12)
    assert b.published_at.tzinfo is not None


def test_validators():
    with pytest.raises(ValidationError):
        validate_draft(ContentDocument(title="  "))
    with pytest.raises(ValidationError, match="category"):
        validate_publish(ContentDocument(title="T", body="B"))
    with pytest.raises(ValidationError, match="at least 6"):
        validate_password("abc", "abc")
    with pytest.raises(ValidationError):
        validate_delete_confirmation("delete")
    validate_delete_confirmation("DELETE")
