from pathlib import Path

import pytest

from conftest import make_snippet
from snipdesk.core.exceptions import SnippetNotFound, ValidationError
from snipdesk.storage import FrontmatterError, SnippetStorage, parse_frontmatter, render_frontmatter


def test_frontmatter_round_trip() -> None:
    snippet = make_snippet("a", tags=["x", "two words"], is_favorite=True, body="line 1\n\nline 3\n")

    text = render_frontmatter(snippet)

    assert text.startswith("---\nid: a\n")
    assert parse_frontmatter(text) == snippet


def test_parse_unquoted_timestamps_and_missing_fields() -> None:
    text = (
        "---\n"
        "id: x1\n"
        "title: Loose\n"
        "created_at: 2024-03-01T10:00:00Z\n"
        "---\n"
        "\n"
        "body"
    )
    snippet = parse_frontmatter(text)
    assert snippet.created_at == "2024-03-01T10:00:00+00:00"
    assert snippet.tags == []
    assert snippet.language == ""
    assert snippet.is_favorite is False
    assert snippet.body == "body"


@pytest.mark.parametrize("text", ["no frontmatter", "---\ntitle: open\n", "---\n- a list\n---\n"])
def test_parse_rejects_malformed(text) -> None:
    with pytest.raises(FrontmatterError):
        parse_frontmatter(text)


def test_save_get_and_reload(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path / "snippets")
    stored = storage.save(make_snippet("a", title="Hello World", tags=["x"]))

    assert stored.updated_at != "2024-01-01T00:00:00+00:00"
    files = list((tmp_path / "snippets").glob("*.md"))
    assert len(files) == 1
    assert files[0].name.startswith("Hello_World_")

    fresh = SnippetStorage(tmp_path / "snippets")
    fresh.load_all()
    assert fresh.get("a") == stored


def test_rename_replaces_old_file(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path)
    snippet = storage.save(make_snippet("a", title="First"))
    snippet.title = "Second"
    storage.save(snippet)

    names = [p.name for p in tmp_path.glob("*.md")]
    assert len(names) == 1
    assert names[0].startswith("Second_")


def test_same_title_different_ids_do_not_collide(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path)
    storage.save(make_snippet("aaaaaaaa1", title="Same"))
    storage.save(make_snippet("bbbbbbbb2", title="Same"))

    assert len(list(tmp_path.glob("*.md"))) == 2


def test_get_returns_copy(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path)
    storage.save(make_snippet("a", tags=["x"]))
    storage.get("a").tags.append("mutated")
    assert storage.get("a").tags == ["x"]


def test_save_validates(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path)
    with pytest.raises(ValidationError):
        storage.save(make_snippet("a", title=""))
    with pytest.raises(ValidationError):
        storage.save(make_snippet("", title="no id"))


def test_delete(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path)
    storage.save(make_snippet("a"))
    storage.delete("a")

    assert list(tmp_path.glob("*.md")) == []
    with pytest.raises(SnippetNotFound):
        storage.get("a")
    with pytest.raises(SnippetNotFound):
        storage.delete("a")


def test_load_all_skips_bad_files(tmp_path: Path) -> None:
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "good.md").write_text(render_frontmatter(make_snippet("good")), encoding="utf-8")
    (tmp_path / "broken.md").write_text("not a snippet", encoding="utf-8")
    (tmp_path / "untitled.md").write_text(render_frontmatter(make_snippet("u", title="")), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    storage = SnippetStorage(tmp_path)
    storage.load_all()

    assert [s.id for s in storage.list_all()] == ["good"]


def test_list_all_newest_first(tmp_path: Path) -> None:
    (tmp_path / "old.md").write_text(
        render_frontmatter(make_snippet("old", updated_at="2023-01-01T00:00:00+00:00")), encoding="utf-8"
    )
    (tmp_path / "new.md").write_text(
        render_frontmatter(make_snippet("new", updated_at="2024-01-01T00:00:00+00:00")), encoding="utf-8"
    )
    storage = SnippetStorage(tmp_path)
    storage.load_all()
    assert [s.id for s in storage.list_all()] == ["new", "old"]


def test_search_through_storage(tmp_path: Path) -> None:
    storage = SnippetStorage(tmp_path)
    storage.save(make_snippet("a", title="Docker cleanup", body="docker system prune"))
    storage.save(make_snippet("b", title="Bash loop", tags=["docker"]))
    storage.save(make_snippet("c", title="Unrelated", body="nothing"))

    assert [s.id for s in storage.search("docker")] == ["a", "b"]
    assert len(storage.search("")) == 3
