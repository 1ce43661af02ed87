"""
Sequence Service
Report identifier allocation

Identifiers are ``REQ-`` followed by the sequence number zero-padded to four
digits (``REQ-0001``). Numbers past 9999 simply grow wider (``REQ-10000``).
The counter is persisted state, never derived from existing report ids, so an
id is never reissued even if old reports are pruned.
"""

from typing import Tuple

from src.config.settings import settings
from src.schemas.state import SequenceState


def format_report_id(sequence_number: int) -> str:
    """
    Render a sequence number as a report identifier

    Args:
        sequence_number: Positive sequence number

    Returns:
        str: Identifier such as REQ-0007
    """
    if sequence_number < 1:
        raise ValueError("Sequence numbers start at 1")
    return f"{settings.REPORT_ID_PREFIX}{sequence_number:0{settings.REPORT_ID_WIDTH}d}"


def allocate_report_id(state: SequenceState) -> Tuple[str, SequenceState]:
    """
    Issue the next identifier

    Args:
        state: Current counter state

    Returns:
        Tuple of (report_id, new_state); the input state is not modified
    """
    report_id = format_report_id(state.next_value)
    return report_id, SequenceState(next_value=state.next_value + 1)
