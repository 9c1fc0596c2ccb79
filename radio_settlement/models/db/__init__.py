from .stations import RadioStation, RadioShow
from .songs import Song
from .bands import Band, BandFameEvent, BandEarning
from .submissions import RadioSubmission
from .playlists import RadioPlaylist, RadioPlay
from .enums import SubmissionStatus, FameEventType, EarningSource

__all__ = [
    "RadioStation",
    "RadioShow",
    "Song",
    "Band",
    "BandFameEvent",
    "BandEarning",
    "RadioSubmission",
    "RadioPlaylist",
    "RadioPlay",
    "SubmissionStatus",
    "FameEventType",
    "EarningSource",
]
