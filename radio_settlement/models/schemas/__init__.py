from .base import ResponseBase
from .submissions import SubmissionCreate, SubmissionRead, SettlementSummaryRead
from .playlists import PlaylistEntryRead, PlayRead
from .bands import FameEventRead, EarningRead, BandRadioEarnings

__all__ = [
    # Base
    "ResponseBase",

    # Submissions
    "SubmissionCreate",
    "SubmissionRead",
    "SettlementSummaryRead",

    # Playlists
    "PlaylistEntryRead",
    "PlayRead",

    # Bands
    "FameEventRead",
    "EarningRead",
    "BandRadioEarnings",
]
