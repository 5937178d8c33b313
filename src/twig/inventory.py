"""Branch inventory: one record per branch across the local and remote mirrors."""

from dataclasses import dataclass

from twig.git import BranchSource
from twig.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BranchRecord:
    """A branch in the reconciled inventory.

    ``name`` is either a bare local branch name (``feature/x``) or, for a branch
    that only exists on the remote, its qualified form (``remotes/origin/feature/x``).
    """

    name: str
    is_remote_tracked: bool


def remote_prefix(remote_name: str) -> str:
    """Get the ref prefix of a remote's namespace."""
    return f"remotes/{remote_name}/"


def _matches(remote_ref: str, local_name: str, prefix: str, exact: bool) -> bool:
    if exact:
        return remote_ref == prefix + local_name
    # Suffix heuristic: "remotes/origin/foo/bar" also matches a local "bar"
    return remote_ref.endswith(local_name)


def build_inventory(
    remote_name: str,
    local_names: list[str],
    refs: list[str],
    exact: bool = False,
) -> tuple[BranchRecord, ...]:
    """Correlate local branch names with the refs of one remote.

    Local branches come first in input order, each flagged when a ref in the
    remote's namespace matches it. Remote refs that match no local branch
    follow in input order as remote-only records. Refs of other remotes are
    ignored.

    Args:
        remote_name: Remote whose namespace is reconciled
        local_names: Local branch names
        refs: Branch refs; only ``remotes/<remote_name>/...`` entries are used
        exact: Compare full paths instead of using the suffix heuristic
    """
    prefix = remote_prefix(remote_name)
    remote_refs = [ref for ref in refs if ref.startswith(prefix)]

    records = [
        BranchRecord(
            name=local,
            is_remote_tracked=any(_matches(ref, local, prefix, exact) for ref in remote_refs),
        )
        for local in local_names
    ]
    records.extend(
        BranchRecord(name=ref, is_remote_tracked=True)
        for ref in remote_refs
        if not any(_matches(ref, local, prefix, exact) for local in local_names)
    )
    return tuple(records)


def load_inventory(source: BranchSource, remote_name: str, exact: bool = False) -> tuple[BranchRecord, ...]:
    """Query a branch source and build its inventory for ``remote_name``."""
    inventory = build_inventory(remote_name, source.list_local_branches(), source.list_all_refs(), exact=exact)
    logger.debug("Inventory for %s has %d branch(es)", remote_name, len(inventory))
    return inventory
