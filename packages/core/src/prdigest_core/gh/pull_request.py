from __future__ import annotations

from github import Github, GithubException
from requests.exceptions import RequestException

from prdigest_core.errors import FetchError, PublishError
from prdigest_core.models import PullRequestInfo


def get_repo(repo_name: str, token: str, timeout: float | None = None):
    if timeout is not None:
        return Github(token, timeout=int(timeout)).get_repo(repo_name)
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    try:
        return repo.get_pull(pr_number)
    except (GithubException, RequestException) as e:
        raise FetchError(f"Could not load PR #{pr_number}: {e}") from e


def get_pull_request_info(pr) -> PullRequestInfo:
    return PullRequestInfo(
        number=pr.number,
        title=pr.title or "",
        body=pr.body or "",
        author=pr.user.login if pr.user else "",
        base_ref=pr.base.ref,
        head_ref=pr.head.ref,
        changed_files=pr.changed_files,
        additions=pr.additions,
        deletions=pr.deletions,
    )


def list_commits(pr) -> list:
    """Return the PR's commits in the order GitHub lists them (oldest first)."""
    try:
        return list(pr.get_commits())
    except (GithubException, RequestException) as e:
        raise FetchError(f"Could not list commits: {e}") from e


def get_commit(repo, sha: str):
    """Return a commit and the list of its changed files.

    ``commit.files`` is paginated lazily, so it is read here where page
    errors are still wrapped.
    """
    try:
        commit = repo.get_commit(sha)
        return commit, list(commit.files)
    except (GithubException, RequestException) as e:
        raise FetchError(f"Could not fetch commit {sha[:7]}: {e}") from e


def list_files(pr) -> list:
    try:
        return list(pr.get_files())
    except (GithubException, RequestException) as e:
        raise FetchError(f"Could not list files: {e}") from e


def get_file_content(repo, path: str, ref: str) -> str:
    """Fetch a file at ``ref`` and decode it to text.

    The contents API returns the blob base64-encoded; ``decoded_content``
    holds the raw bytes after decoding. Files over 1 MB come back with
    encoding "none" and no content.
    """
    try:
        contents = repo.get_contents(path, ref=ref)
        if isinstance(contents, list):
            raise FetchError(f"{path} is a directory, not a file.")
        if contents.encoding != "base64":
            raise FetchError(f"{path} is too large for the contents API (encoding: {contents.encoding}).")
        return contents.decoded_content.decode("utf-8", errors="replace")
    except (GithubException, RequestException) as e:
        raise FetchError(f"Could not fetch {path}@{ref[:7]}: {e}") from e


def create_comment(pr, body: str):
    """Post ``body`` as a conversation comment on the pull request."""
    try:
        return pr.create_issue_comment(body)
    except (GithubException, RequestException) as e:
        raise PublishError(f"Could not post comment on PR #{pr.number}: {e}") from e
