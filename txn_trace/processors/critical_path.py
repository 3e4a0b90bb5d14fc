"""
Critical path analysis for span forests.
"""

from typing import Iterable, List, Optional

from ..core.types import SpanNode


class CriticalPathAnalyzer:
    """Selects the dominant root-to-leaf path of every tree in a forest."""

    def compute_critical_path(self, spans: List[SpanNode]) -> List[str]:
        """
        Walk each root down to a leaf, marking every visited node.

        Args:
            spans: Root spans of the forest (modified in-place)

        Returns:
            Span ids on the critical path, one path per root in forest order
        """
        critical_path: List[str] = []
        for root in spans or []:
            node = root
            while node is not None:
                node.on_critical_path = True
                critical_path.append(node.id)
                node = self.select_dominant_child(node)
        return critical_path

    @staticmethod
    def select_dominant_child(node: SpanNode) -> Optional[SpanNode]:
        """
        Pick the child that ends last without overrunning its parent.

        Children ending after the parent (noisy timestamps) or at offset 0 are
        ignored. When no child qualifies the first child in arrival order is
        used, so a path is always produced.

        Args:
            node: Parent span

        Returns:
            Chosen child, or None for a leaf
        """
        if not node.children:
            return None

        parent_end = node.end_offset_ms
        dominant = None
        max_end = 0
        for child in node.children:
            child_end = child.end_offset_ms
            if max_end < child_end <= parent_end:
                max_end = child_end
                dominant = child

        return dominant if dominant is not None else node.children[0]

    @staticmethod
    def mark_critical_path(spans: List[SpanNode], path_ids: Iterable[str]) -> None:
        """
        Set on_critical_path for every node of the forest whose id is in path_ids.

        Args:
            spans: Root spans of the forest (modified in-place)
            path_ids: Previously computed critical path ids
        """
        path_set = set(path_ids or [])
        pending = list(spans or [])
        while pending:
            node = pending.pop()
            if node.id in path_set:
                node.on_critical_path = True
            pending.extend(node.children)

    @staticmethod
    def compute_contribution(node: SpanNode, total_duration_ms: float) -> float:
        """
        Percentage of the total trace duration spent in this span.

        Returns:
            node.duration_ms / total_duration_ms * 100, or 0 when the total is 0
        """
        if not total_duration_ms:
            return 0.0
        return node.duration_ms / total_duration_ms * 100

    def annotate_contributions(self, spans: List[SpanNode], total_duration_ms: float) -> None:
        """Store each node's contribution percentage on the node."""
        pending = list(spans or [])
        while pending:
            node = pending.pop()
            node.contribution_pct = round(self.compute_contribution(node, total_duration_ms), 2)
            pending.extend(node.children)
