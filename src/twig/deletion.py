"""Branch deletion with remote cascade and per-branch failure isolation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from twig.git import BranchSource, GitError
from twig.inventory import load_inventory, remote_prefix
from twig.logging_config import get_logger

logger = get_logger(__name__)


class DeletionStatus(Enum):
    """Where a deletion attempt ended up."""

    PENDING = "pending"
    LOCAL_DELETED = "local"
    REMOTE_DELETED = "remote"
    FAILED = "failed"


@dataclass
class DeletionOutcome:
    """Result of deleting one selected branch."""

    identifier: str
    locally_deleted: bool = False
    remotely_deleted: bool = False
    error: Optional[str] = None
    remote_ref: Optional[str] = None

    @property
    def status(self) -> DeletionStatus:
        if self.error is not None:
            return DeletionStatus.FAILED
        if self.locally_deleted:
            return DeletionStatus.LOCAL_DELETED
        if self.remotely_deleted:
            return DeletionStatus.REMOTE_DELETED
        return DeletionStatus.PENDING

    @property
    def failed(self) -> bool:
        return self.status == DeletionStatus.FAILED


def delete_one(source: BranchSource, identifier: str, remote_name: str, exact: bool = False) -> DeletionOutcome:
    """Delete one branch and, for a local branch, its remote counterpart.

    A qualified ``remotes/<remote_name>/<branch>`` identifier deletes ``<branch>``
    on the remote only. A bare name is deleted locally (unmerged branches are
    refused), then a freshly built inventory decides whether the remote still
    has ``remotes/<remote_name>/<name>``, which is deleted too.

    Git errors never escape: they are recorded on the returned outcome.
    """
    outcome = DeletionOutcome(identifier=identifier)
    prefix = remote_prefix(remote_name)

    try:
        if identifier.startswith(prefix):
            source.delete_remote_branch(remote_name, identifier[len(prefix) :])
            outcome.remotely_deleted = True
            logger.info("Deleted remote branch %s", identifier)
            return outcome

        source.delete_local_branch(identifier)
        outcome.locally_deleted = True
        logger.info("Deleted local branch %s", identifier)

        remote_ref = prefix + identifier
        inventory = load_inventory(source, remote_name, exact=exact)
        if any(record.name == remote_ref for record in inventory):
            source.delete_remote_branch(remote_name, identifier)
            outcome.remotely_deleted = True
            outcome.remote_ref = remote_ref
            logger.info("Deleted corresponding remote branch %s", remote_ref)
    except GitError as err:
        outcome.error = str(err)
        logger.warning("Failed to delete branch %s: %s", identifier, err)

    return outcome


def delete_many(
    source: BranchSource,
    identifiers: list[str],
    remote_name: str,
    exact: bool = False,
) -> list[DeletionOutcome]:
    """Delete branches one after another, one outcome per identifier.

    Each deletion, cascade included, finishes before the next starts since
    they all mutate the same working copy.
    """
    return [delete_one(source, identifier, remote_name, exact=exact) for identifier in identifiers]
