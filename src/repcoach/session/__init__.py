"""
Session package: rep debouncing and per-attempt aggregation.
"""

from .rep_debouncer import IMPROVE_FORM_FEEDBACK, SessionState, advance_session_state
from .session_tracker import CompletionReport, FrameUpdate, SessionStats, SessionSummary, SessionTracker

__all__ = [
    'IMPROVE_FORM_FEEDBACK',
    'SessionState',
    'advance_session_state',
    'CompletionReport',
    'FrameUpdate',
    'SessionStats',
    'SessionSummary',
    'SessionTracker'
]
