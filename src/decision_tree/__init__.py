"""Decision Tree workflows.

Resumable decision-tree workflows whose position is persisted as a compact
fingerprint, so the same logical workflow can be re-instantiated for every
incoming event and resume where it left off.
"""

__version__ = "0.1.0"

from decision_tree.workflow import Signal, Step, TraversalContext, TreeBuilder, Workflow

__all__ = ["__version__", "Signal", "Step", "TraversalContext", "TreeBuilder", "Workflow"]
