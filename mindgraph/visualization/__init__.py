"""
Visualization boundary for mindgraph

Rendering lives outside this package; this module only exports read-only
snapshots of the concept graph for external renderers.
"""

from .snapshot import GraphSnapshot, GraphSnapshotExporter, SnapshotEdge, SnapshotNode

__all__ = ['GraphSnapshot', 'GraphSnapshotExporter', 'SnapshotEdge', 'SnapshotNode']
