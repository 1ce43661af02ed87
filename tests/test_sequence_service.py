"""
Sequence Allocator Tests
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from src.schemas.state import SequenceState
from src.services.sequence_service import allocate_report_id, format_report_id


class TestSequence:
    """Test report id allocation"""

    def test_zero_padding(self):
        """Test ids are padded to four digits"""
        assert format_report_id(1) == "REQ-0001"
        assert format_report_id(42) == "REQ-0042"
        assert format_report_id(9999) == "REQ-9999"

    def test_wider_than_padding(self):
        """Test numbers past 9999 are not truncated"""
        assert format_report_id(10000) == "REQ-10000"

    def test_invalid_number(self):
        """Test sequence numbers start at 1"""
        with pytest.raises(ValueError):
            format_report_id(0)

    def test_allocation_is_monotonic(self):
        """Test consecutive allocations never repeat"""
        state = SequenceState()
        issued = []
        for _ in range(5):
            report_id, state = allocate_report_id(state)
            issued.append(report_id)

        assert issued == ["REQ-0001", "REQ-0002", "REQ-0003", "REQ-0004", "REQ-0005"]
        assert state.next_value == 6

    def test_input_state_unchanged(self):
        """Test the caller's state is not modified"""
        state = SequenceState(next_value=7)
        report_id, new_state = allocate_report_id(state)
        assert report_id == "REQ-0007"
        assert state.next_value == 7
        assert new_state.next_value == 8


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
