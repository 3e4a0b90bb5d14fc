"""
Unit tests for txn_trace.processors.critical_path module.
"""
import pytest
from txn_trace.core.types import LogType, SpanNode
from txn_trace.processors.critical_path import CriticalPathAnalyzer


def span(span_id, start, duration, children=None, log_type=LogType.API):
    node = SpanNode(id=span_id, log_type=log_type, start_offset_ms=start, duration_ms=duration)
    for child in children or []:
        child.parent_id = span_id
        node.children.append(child)
    return node


@pytest.fixture
def analyzer():
    return CriticalPathAnalyzer()


class TestComputeCriticalPath:
    """Tests for dominant path selection."""

    def test_single_span(self, analyzer):
        root = span('only', 0, 50)

        assert analyzer.compute_critical_path([root]) == ['only']
        assert root.on_critical_path is True

    def test_empty_forest(self, analyzer):
        assert analyzer.compute_critical_path([]) == []
        assert analyzer.compute_critical_path(None) == []

    def test_selects_child_ending_last(self, analyzer):
        """Children ending at 70 and 100 under a 100ms root: the later one wins."""
        early = span('early', 10, 60)
        late = span('late', 50, 50)
        root = span('root', 0, 100, [early, late])

        assert analyzer.compute_critical_path([root]) == ['root', 'late']
        assert late.on_critical_path is True
        assert early.on_critical_path is False

    def test_overrunning_child_is_excluded(self, analyzer):
        """A child ending at 150 under a root ending at 100 is not considered."""
        fits = span('fits', 10, 50)
        overrun = span('overrun', 50, 100)
        root = span('root', 0, 100, [fits, overrun])

        assert analyzer.compute_critical_path([root]) == ['root', 'fits']
        assert overrun.on_critical_path is False

    def test_only_overrunning_child_falls_back(self, analyzer):
        overrun = span('overrun', 50, 100)
        root = span('root', 0, 100, [overrun])

        assert analyzer.compute_critical_path([root]) == ['root', 'overrun']

    def test_all_overrunning_children_pick_first(self, analyzer):
        first = span('first', 10, 200)
        second = span('second', 20, 300)
        root = span('root', 0, 100, [first, second])

        assert analyzer.compute_critical_path([root]) == ['root', 'first']

    def test_child_ending_at_zero_is_excluded(self, analyzer):
        """A zero-length child at offset 0 never outranks the first-child fallback."""
        overrun = span('overrun', 10, 200)
        zero = span('zero', 0, 0)
        root = span('root', 0, 100, [overrun, zero])

        assert analyzer.compute_critical_path([root]) == ['root', 'overrun']
        assert zero.on_critical_path is False

    def test_tie_keeps_arrival_order(self, analyzer):
        a = span('a', 0, 100)
        b = span('b', 50, 50)
        root = span('root', 0, 100, [a, b])

        assert analyzer.compute_critical_path([root]) == ['root', 'a']

    def test_walks_down_to_leaf(self, analyzer):
        leaf = span('leaf', 30, 20, log_type=LogType.SQL)
        middle = span('middle', 20, 60, [leaf], log_type=LogType.FILTER)
        side = span('side', 5, 10, log_type=LogType.SQL)
        root = span('root', 0, 100, [side, middle])

        assert analyzer.compute_critical_path([root]) == ['root', 'middle', 'leaf']

    def test_one_path_per_root(self, analyzer):
        first = span('r1', 0, 100, [span('r1-child', 10, 50)])
        second = span('r2', 200, 10)

        assert analyzer.compute_critical_path([first, second]) == ['r1', 'r1-child', 'r2']


class TestMarkCriticalPath:
    """Tests for re-applying a stored critical path."""

    def test_marks_every_listed_node(self, analyzer):
        a = span('a', 10, 20)
        b = span('b', 40, 20)
        deep = span('deep', 45, 5)
        c = span('c', 40, 30, [deep])
        root = span('root', 0, 100, [a, b, c])

        analyzer.mark_critical_path([root], ['root', 'a', 'deep'])

        assert root.on_critical_path is True
        assert a.on_critical_path is True
        assert deep.on_critical_path is True
        assert b.on_critical_path is False
        assert c.on_critical_path is False

    def test_unknown_ids_are_ignored(self, analyzer):
        root = span('root', 0, 100)

        analyzer.mark_critical_path([root], ['missing'])

        assert root.on_critical_path is False

    def test_rehydrates_rebuilt_tree(self, analyzer):
        original = span('root', 0, 100, [span('child', 10, 80)])
        path = analyzer.compute_critical_path([original])

        rebuilt = span('root', 0, 100, [span('child', 10, 80)])
        analyzer.mark_critical_path([rebuilt], path)

        assert rebuilt.on_critical_path is True
        assert rebuilt.children[0].on_critical_path is True


class TestContribution:
    """Tests for contribution percentages."""

    def test_percentage_of_total(self, analyzer):
        assert analyzer.compute_contribution(span('s', 0, 25), 100) == pytest.approx(25.0)

    def test_zero_total_returns_zero(self, analyzer):
        assert analyzer.compute_contribution(span('s', 0, 25), 0) == 0

    def test_annotate_contributions(self, analyzer):
        child = span('child', 0, 1)
        root = span('root', 0, 3, [child])

        analyzer.annotate_contributions([root], 3)

        assert root.contribution_pct == 100.0
        assert child.contribution_pct == 33.33
