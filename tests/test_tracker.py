"""
Tests for PositionTracker.

Document used throughout: doc(slide(paragraph("Hello world"))).
The paragraph's text runs from position 2 to 13.
"""
import pytest

from blockslides.state import EditorState
from blockslides.tracker import PositionTracker, TrackerResult


@pytest.fixture
def tr(kit_schema):
    doc = kit_schema.node_from_json(
        {
            "type": "doc",
            "content": [
                {
                    "type": "slide",
                    "content": [
                        {"type": "paragraph", "content": [{"type": "text", "text": "Hello world"}]}
                    ],
                }
            ],
        }
    )
    return EditorState.create(kit_schema.pm, doc=doc).tr


class TestPositionTracker:
    """Tests for mapping positions through transaction steps."""

    @pytest.mark.parametrize("position", [0, 2, 7, 13])
    def test_fresh_tracker_is_identity(self, tr, position):
        tracker = PositionTracker(tr)
        assert tracker.map(position) == TrackerResult(position=position, deleted=False)

    def test_insertion_before_shifts(self, tr):
        tracker = PositionTracker(tr)
        tr.insert_text("Oh ", 2, 2)

        assert tracker.map(8) == TrackerResult(position=11, deleted=False)

    def test_insertion_after_does_not_shift(self, tr):
        tracker = PositionTracker(tr)
        tr.insert_text("!", 13, 13)

        assert tracker.map(4).position == 4

    def test_deletion_is_reported(self, tr):
        tracker = PositionTracker(tr)
        tr.delete(3, 8)

        result = tracker.map(5)
        assert result.deleted is True
        assert result.position == 3

    def test_deleted_flag_latches(self, tr):
        """Later non-overlapping edits keep deleted=True."""
        tracker = PositionTracker(tr)
        tr.delete(3, 8)
        assert tracker.map(5).deleted is True

        tr.insert_text("x", 2, 2)
        result = tracker.map(5)

        assert result.deleted is True
        assert result.position == 4

    def test_steps_before_checkpoint_are_ignored(self, tr):
        tr.insert_text("Oh ", 2, 2)
        tracker = PositionTracker(tr)

        assert tracker.checkpoint == 1
        assert tracker.map(8).position == 8

    def test_map_rederives_each_call(self, tr):
        """Steps added after a map() call are included in the next one."""
        tracker = PositionTracker(tr)
        assert tracker.map(8).position == 8

        tr.insert_text("ab", 2, 2)
        assert tracker.map(8).position == 10

        tr.insert_text("c", 2, 2)
        assert tracker.map(8).position == 11

    def test_assoc_at_insertion_point(self, tr):
        tracker = PositionTracker(tr)
        tr.insert_text("ab", 5, 5)

        assert tracker.map(5, assoc=1).position == 7
        assert tracker.map(5, assoc=-1).position == 5
