"""Test configuration and fixtures."""

import logging
from pathlib import Path
from typing import Generator, Optional

import pytest
from git import Actor, Repo

from twig.git import GitError
from twig.logging_config import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers the CLI attached, they point at the runner's closed streams."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Branches in the local repository:
    - main, feature/x, tmp: local and pushed to origin
    - solo: local only, merged
    - wip: local only, with an unmerged commit
    - stale: pushed to origin, deleted locally

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # git may default to master
    if local_repo.active_branch.name != "main":
        local_repo.active_branch.rename("main")
    main_branch = local_repo.heads.main

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    for name in ("feature/x", "tmp", "stale"):
        local_repo.create_head(name)
        origin.push(name)
    local_repo.delete_head("stale")

    local_repo.create_head("solo")

    wip = local_repo.create_head("wip")
    wip.checkout()
    (local_path / "wip.txt").write_text("Work in progress")
    local_repo.index.add(["wip.txt"])
    local_repo.index.commit("Add wip", author=author)

    main_branch.checkout()

    yield local_path, remote_path


def remote_heads(remote_path: Path) -> list[str]:
    """Get the branch names that exist on a bare remote."""
    return [head.name for head in Repo(remote_path).heads]


class FakeSource:
    """In-memory branch source that records every call."""

    def __init__(
        self,
        local: list[str],
        refs: list[str],
        fail_local: Optional[dict[str, str]] = None,
        fail_remote: Optional[dict[str, str]] = None,
    ) -> None:
        self.local = list(local)
        self.refs = list(refs)
        self.fail_local = fail_local or {}
        self.fail_remote = fail_remote or {}
        self.calls: list[tuple] = []

    def list_local_branches(self) -> list[str]:
        return list(self.local)

    def list_all_refs(self) -> list[str]:
        return list(self.local) + list(self.refs)

    def delete_local_branch(self, name: str) -> None:
        self.calls.append(("local", name))
        if name in self.fail_local:
            raise GitError(self.fail_local[name])
        self.local.remove(name)

    def delete_remote_branch(self, remote_name: str, name: str) -> None:
        self.calls.append(("remote", remote_name, name))
        if name in self.fail_remote:
            raise GitError(self.fail_remote[name])
        self.refs.remove(f"remotes/{remote_name}/{name}")
