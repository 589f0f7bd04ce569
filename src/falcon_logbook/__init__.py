"""Falcon logbook codec - read and write obfuscated pilot logbooks."""
from .errors import LogbookError
from .layout import decode, encode, read_logbook, write_logbook
from .record import CampaignStats, DogfightStats, LogbookRecord, Medal, Rank

__all__ = [
    "LogbookError",
    "decode",
    "encode",
    "read_logbook",
    "write_logbook",
    "CampaignStats",
    "DogfightStats",
    "LogbookRecord",
    "Medal",
    "Rank",
]
