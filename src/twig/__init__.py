"""Git branch reconciliation and deletion tool.

Features:
- One inventory of local and remote branches for a chosen remote
- Keyword filter and interactive checklist selection
- Local deletion that cascades to the remote counterpart
- Remote-only branch deletion
- Per-branch failure reporting without aborting the batch
"""

__version__ = "0.1.0"
