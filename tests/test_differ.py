"""Tests for the diff engine."""

from pathlib import Path

from conftest import write_files

from cartographer.index.differ import compute_diff, diff_digests, digest_files
from cartographer.index.digest import digest_of
from cartographer.index.models import DigestEntry


def _store_for(root: Path, paths):
    digests, _ = digest_files(root, paths)
    return {p: DigestEntry(d, "batch", f"About {p}") for p, d in digests.items()}


class TestDiffDigests:
    def test_classifies_each_path(self):
        store = {
            "same.py": DigestEntry(digest_of(b"same"), "batch", "Same"),
            "edit.py": DigestEntry(digest_of(b"old"), "batch", "Edit"),
            "gone.py": DigestEntry(digest_of(b"gone"), "batch", "Gone"),
        }
        current = {
            "same.py": digest_of(b"same"),
            "edit.py": digest_of(b"new"),
            "new.py": digest_of(b"new file"),
        }
        result = diff_digests(current, store)
        assert result.added == {"new.py"}
        assert result.changed == {"edit.py"}
        assert result.removed == {"gone.py"}
        assert result.unchanged == {"same.py"}

    def test_partition_invariant(self):
        store = {f"s{i}.py": DigestEntry(digest_of(str(i).encode()), "batch", "x") for i in range(6)}
        current = {f"s{i}.py": digest_of(str(i * (i % 2)).encode()) for i in range(3, 9)}
        result = diff_digests(current, store)
        sets = [result.added, result.changed, result.removed, result.unchanged]
        for i, a in enumerate(sets):
            for b in sets[i + 1:]:
                assert not a & b
        assert result.added | result.changed | result.unchanged == set(current)
        assert result.removed == set(store) - set(current)

    def test_tier_change_alone_is_unchanged(self):
        store = {"a.py": DigestEntry(digest_of(b"a"), "deep", "A")}
        result = diff_digests({"a.py": digest_of(b"a")}, store)
        assert result.unchanged == {"a.py"}
        assert not result.has_changes

    def test_empty_store_means_all_added(self):
        result = diff_digests({"a.py": "1", "b.py": "2"}, {})
        assert result.added == {"a.py", "b.py"}
        assert result.to_analyze == {"a.py", "b.py"}


class TestComputeDiff:
    def test_idempotent_on_unmodified_tree(self, sample_project: Path):
        paths = ["package-lock.json", "src/index.ts", "src/util.ts"]
        store = _store_for(sample_project, paths)
        for _ in range(2):
            result = compute_diff(sample_project, paths, store)
            assert result.added == set()
            assert result.changed == set()
            assert result.removed == set()
            assert result.unchanged == set(paths)

    def test_detects_edit(self, sample_project: Path):
        paths = ["package-lock.json", "src/index.ts", "src/util.ts"]
        store = _store_for(sample_project, paths)
        (sample_project / "src/util.ts").write_text("export const x = 1;\n")
        result = compute_diff(sample_project, paths, store)
        assert result.changed == {"src/util.ts"}

    def test_unreadable_file_reported_and_excluded(self, tmp_path: Path):
        write_files(tmp_path, {"ok.py": "x = 1\n"})
        (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00\x01")
        seen = []
        result = compute_diff(
            tmp_path, ["ok.py", "blob.bin"], {}, on_error=lambda p, e: seen.append(p)
        )
        assert result.added == {"ok.py"}
        assert result.unreadable == ["blob.bin"]
        assert seen == ["blob.bin"]
        assert "blob.bin" not in result.digests

    def test_stored_file_turned_unreadable_is_removed(self, tmp_path: Path):
        write_files(tmp_path, {"data.txt": "text\n"})
        store = _store_for(tmp_path, ["data.txt"])
        (tmp_path / "data.txt").write_bytes(b"\xff\xfe\x00")
        result = compute_diff(tmp_path, ["data.txt"], store)
        assert result.removed == {"data.txt"}
