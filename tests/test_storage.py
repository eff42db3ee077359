"""Tests for the thumbnail cache and the prompt audit log."""

import pytest

from docmeta.services.storage import RULE, PromptLog, ThumbnailCache


class FakeRepository:
    def __init__(self, data=b"\x89PNG fake"):
        self.data = data
        self.calls = []

    def get_thumbnail_image(self, document_id):
        self.calls.append(document_id)
        return self.data


@pytest.fixture
def repo():
    return FakeRepository()


class TestThumbnailCache:

    def test_miss_fetches_and_writes(self, tmp_path, repo):
        cache = ThumbnailCache(tmp_path / "images", repo)
        path = cache.ensure(42)
        assert path == tmp_path / "images" / "42.png"
        assert path.read_bytes() == b"\x89PNG fake"
        assert repo.calls == [42]

    def test_hit_does_not_refetch(self, tmp_path, repo):
        cache = ThumbnailCache(tmp_path, repo)
        (tmp_path / "7.png").write_bytes(b"cached")
        assert cache.ensure(7) == tmp_path / "7.png"
        assert repo.calls == []
        assert (tmp_path / "7.png").read_bytes() == b"cached"

    def test_second_call_uses_cache(self, tmp_path, repo):
        cache = ThumbnailCache(tmp_path, repo)
        cache.ensure(1)
        cache.ensure(1)
        assert repo.calls == [1]

    def test_missing_thumbnail_writes_nothing(self, tmp_path):
        cache = ThumbnailCache(tmp_path, FakeRepository(data=None))
        assert cache.ensure(5) is None
        assert not (tmp_path / "5.png").exists()


class TestPromptLog:

    def test_append(self, tmp_path):
        log = PromptLog(tmp_path / "logs" / "prompt.txt")
        log.write("first")
        log.write("second")
        content = (tmp_path / "logs" / "prompt.txt").read_text(encoding="utf-8")
        assert content == f"{RULE}first\n\n{RULE}\n\n{RULE}second\n\n{RULE}\n\n"

    def test_oversized_log_is_restarted(self, tmp_path):
        path = tmp_path / "prompt.txt"
        path.write_text("x" * 200, encoding="utf-8")
        log = PromptLog(path, max_bytes=100)
        log.write("fresh")
        assert path.read_text(encoding="utf-8") == f"{RULE}fresh\n\n{RULE}\n\n"

    def test_log_below_threshold_is_kept(self, tmp_path):
        path = tmp_path / "prompt.txt"
        path.write_text("old", encoding="utf-8")
        PromptLog(path, max_bytes=100).write("new")
        assert path.read_text(encoding="utf-8").startswith("old")

    def test_unwritable_path_does_not_raise(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        # parent is a regular file, so mkdir/open fail with OSError
        PromptLog(blocker / "prompt.txt").write("ignored")


class TestThumbnailCacheIds:

    def test_path_traversal_id_rejected(self, tmp_path, repo):
        cache = ThumbnailCache(tmp_path / "images", repo)
        with pytest.raises(ValueError):
            cache.ensure("../escaped")
        assert not (tmp_path / "escaped.png").exists()
        assert repo.calls == []

    @pytest.mark.parametrize("document_id", ["a/b", "", "1.png", "..", "x y"])
    def test_non_token_ids_rejected(self, tmp_path, repo, document_id):
        with pytest.raises(ValueError):
            ThumbnailCache(tmp_path, repo).path_for(document_id)

    def test_string_token_id_allowed(self, tmp_path, repo):
        assert ThumbnailCache(tmp_path, repo).path_for("doc_12") == tmp_path / "doc_12.png"
