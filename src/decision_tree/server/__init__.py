"""FastAPI server adapter for decision-tree workflows.

Design intent:
- Keep traversal and persistence in `decision_tree.workflow` and `decision_tree.stores`
- Keep server-specific concerns (routing, request models, HTTP errors) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from decision_tree.server.app import create_app
