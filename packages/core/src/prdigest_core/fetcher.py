"""Turn GitHub commits and files into WorkUnits."""

from __future__ import annotations

import logging

from prdigest_core.admission import cap_files, change_volume
from prdigest_core.gh.pull_request import get_commit, get_file_content, list_commits, list_files
from prdigest_core.models import FileChange, WorkUnit

logger = logging.getLogger(__name__)

# Files with these extensions carry no reviewable text.
BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp", ".bmp", ".pdf",
        ".woff", ".woff2", ".ttf", ".eot", ".otf",
        ".mp3", ".mp4", ".wav", ".ogg",
        ".zip", ".tar", ".gz", ".rar", ".7z", ".jar", ".exe", ".dll", ".so",
    }
)  # fmt: skip


def is_reviewable_file(file) -> bool:
    """Removed files and binary assets are never sent for review."""
    if file.status == "removed":
        return False
    return not file.filename.lower().endswith(tuple(BINARY_EXTENSIONS))


def enumerate_commits(pr) -> list:
    """Return the PR's commits in platform order."""
    return list_commits(pr)


def pending_unit(kind: str, id: str, label: str) -> WorkUnit:
    """A payload-less unit used to report a unit whose fetch failed."""
    return WorkUnit(kind=kind, id=id, label=label, payload="")


def commit_label(commit) -> str:
    message = commit.commit.message or ""
    return message.splitlines()[0] if message else ""


def enumerate_files(pr, max_files: int) -> tuple[list, int]:
    """Return the reviewable PR files up to ``max_files`` and how many were capped."""
    candidates = [f for f in list_files(pr) if is_reviewable_file(f)]
    return cap_files(candidates, max_files)


def fetch_commit_unit(repo, sha: str) -> WorkUnit:
    """Fetch one commit and build its WorkUnit, including the combined diff."""
    commit, commit_files = get_commit(repo, sha)
    files = tuple(
        FileChange(
            filename=f.filename,
            additions=f.additions or 0,
            deletions=f.deletions or 0,
            patch=f.patch or "",
        )
        for f in commit_files
    )
    message = commit.commit.message or ""
    author = commit.commit.author.name if commit.commit.author else ""
    return WorkUnit(
        kind="commit",
        id=commit.sha,
        label=commit_label(commit),
        payload="\n".join(f.patch for f in files),
        change_volume=change_volume(files),
        author=author,
        message=message,
        files=files,
    )


def fetch_file_unit(repo, file, ref: str) -> WorkUnit:
    content = get_file_content(repo, file.filename, ref)
    logger.debug("Fetched %s (%d chars)", file.filename, len(content))
    return WorkUnit(
        kind="file",
        id=f"{file.filename}@{ref}",
        label=file.filename,
        payload=content,
    )
