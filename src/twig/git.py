"""Git repository operations."""

from pathlib import Path
from typing import Protocol

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from twig.logging_config import get_logger

logger = get_logger(__name__)

LOCAL_REF_PREFIX = "refs/heads/"
REMOTE_REF_PREFIX = "refs/remotes/"


class GitError(Exception):
    """Git operation error."""


class BranchSource(Protocol):
    """Anything that can list and delete branches for the inventory and executor."""

    def list_local_branches(self) -> list[str]: ...

    def list_all_refs(self) -> list[str]: ...

    def delete_local_branch(self, name: str) -> None: ...

    def delete_remote_branch(self, remote_name: str, name: str) -> None: ...


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def list_remotes(self) -> list[str]:
        """Get the names of all configured remotes."""
        try:
            return [remote.name for remote in self.repo.remotes]
        except (GitCommandError, ValueError) as err:
            raise GitError(f"Failed to list remotes: {err}") from err

    def fetch_and_prune(self, remote_name: str) -> None:
        """Fetch from a remote and drop remote-tracking refs that no longer exist there."""
        logger.debug("Fetching %s with --prune", remote_name)
        try:
            self.repo.git.fetch(remote_name, "--prune")
        except GitCommandError as err:
            raise GitError(f"Failed to fetch from {remote_name}: {err}") from err

    def list_local_branches(self) -> list[str]:
        """Get local branch names in git's listing order."""
        try:
            output = self.repo.git.branch("--format=%(refname)")
        except GitCommandError as err:
            raise GitError(f"Failed to list local branches: {err}") from err

        return [line[len(LOCAL_REF_PREFIX) :] for line in output.splitlines() if line.startswith(LOCAL_REF_PREFIX)]

    def list_all_refs(self) -> list[str]:
        """Get local and remote-tracking branches.

        Local branches are returned bare (``feature/x``) and remote-tracking
        branches in their qualified form (``remotes/origin/feature/x``).
        Symbolic ``HEAD`` refs and detached HEAD entries are skipped.
        """
        try:
            output = self.repo.git.branch("-a", "--format=%(refname)")
        except GitCommandError as err:
            raise GitError(f"Failed to list branches: {err}") from err

        refs = []
        for line in output.splitlines():
            if line.endswith("/HEAD"):
                continue
            if line.startswith(LOCAL_REF_PREFIX):
                refs.append(line[len(LOCAL_REF_PREFIX) :])
            elif line.startswith(REMOTE_REF_PREFIX):
                refs.append("remotes/" + line[len(REMOTE_REF_PREFIX) :])
        return refs

    def delete_local_branch(self, name: str) -> None:
        """Delete a local branch.

        Uses ``git branch -d``, so git refuses branches that are not fully merged.
        """
        logger.debug("Running git branch -d %s", name)
        try:
            self.repo.git.branch("-d", name)
        except GitCommandError as err:
            raise GitError(_command_message(err)) from err

    def delete_remote_branch(self, remote_name: str, name: str) -> None:
        """Delete a branch on a remote by pushing a deletion."""
        logger.debug("Running git push %s --delete %s", remote_name, name)
        try:
            self.repo.git.push(remote_name, "--delete", name)
        except GitCommandError as err:
            raise GitError(_command_message(err)) from err


def _command_message(err: GitCommandError) -> str:
    """Get git's own error text from a failed command, falling back to the full error."""
    stderr = (err.stderr or "").strip()
    # GitPython wraps stderr as "stderr: '...'"
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip().strip("'").strip()
    return stderr or str(err)
