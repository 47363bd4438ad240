"""Tests for WorkUnit construction and admission helpers."""

import types
from unittest.mock import MagicMock

from prdigest_core.admission import admit_commit, cap_files, change_volume
from prdigest_core.fetcher import enumerate_files, fetch_commit_unit, fetch_file_unit, is_reviewable_file
from prdigest_core.models import FileChange


def _commit():
    commit = MagicMock()
    commit.sha = "0123456789abcdef0123456789abcdef01234567"
    commit.commit.message = "Add parser\n\nHandles nested blocks."
    commit.commit.author.name = "Ana Dev"
    commit.files = [
        types.SimpleNamespace(filename="parser.py", additions=10, deletions=2, patch="@@ -1 +1 @@\n+a"),
        types.SimpleNamespace(filename="image.png", additions=0, deletions=0, patch=None),
    ]
    return commit


class TestFetchCommitUnit:
    def test_builds_unit(self):
        repo = MagicMock()
        repo.get_commit.return_value = _commit()

        unit = fetch_commit_unit(repo, "0123456")

        assert unit.kind == "commit"
        assert unit.id == "0123456789abcdef0123456789abcdef01234567"
        assert unit.short_id == "0123456"
        assert unit.label == "Add parser"
        assert unit.message.endswith("Handles nested blocks.")
        assert unit.author == "Ana Dev"
        assert unit.change_volume == 12
        assert [f.filename for f in unit.files] == ["parser.py", "image.png"]
        assert unit.payload == "@@ -1 +1 @@\n+a\n"

    def test_empty_message(self):
        commit = _commit()
        commit.commit.message = ""
        repo = MagicMock()
        repo.get_commit.return_value = commit
        assert fetch_commit_unit(repo, "x").label == ""


class TestFileUnits:
    def test_fetch_file_unit(self):
        repo = MagicMock()
        repo.get_contents.return_value.encoding = "base64"
        repo.get_contents.return_value.decoded_content = b"x = 1\n"
        file = types.SimpleNamespace(filename="src/x.py", status="added")

        unit = fetch_file_unit(repo, file, "abc")

        assert unit.kind == "file"
        assert unit.id == "src/x.py@abc"
        assert unit.short_id == "src/x.py"
        assert unit.payload == "x = 1\n"
        assert unit.change_volume is None

    def test_is_reviewable_file(self):
        assert is_reviewable_file(types.SimpleNamespace(filename="a.py", status="modified"))
        assert not is_reviewable_file(types.SimpleNamespace(filename="a.py", status="removed"))
        assert not is_reviewable_file(types.SimpleNamespace(filename="Logo.PNG", status="added"))

    def test_enumerate_files_caps_after_filtering(self):
        pr = MagicMock()
        pr.get_files.return_value = [types.SimpleNamespace(filename=f"f{i}.py", status="modified") for i in range(4)] + [
            types.SimpleNamespace(filename="old.py", status="removed")
        ]

        files, capped = enumerate_files(pr, 3)

        assert [f.filename for f in files] == ["f0.py", "f1.py", "f2.py"]
        assert capped == 1


class TestAdmission:
    def test_change_volume(self):
        files = [FileChange("a", 5, 3), FileChange("b", 0, 2)]
        assert change_volume(files) == 10

    def test_admit_boundaries(self):
        assert admit_commit(8, 1000)
        assert admit_commit(1000, 1000)
        assert not admit_commit(1001, 1000)

    def test_cap_files_under_limit(self):
        assert cap_files(["a", "b"], 10) == (["a", "b"], 0)

    def test_cap_files_over_limit(self):
        kept, dropped = cap_files([str(i) for i in range(15)], 10)
        assert kept == [str(i) for i in range(10)]
        assert dropped == 5
