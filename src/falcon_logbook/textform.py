"""JSON bridge for LogbookRecord."""
from __future__ import annotations

import json
from dataclasses import asdict, fields

from .errors import TextFormatError
from .record import CampaignStats, DogfightStats, LogbookRecord, Medal, Rank

CANONICAL_JSON_KW = {"sort_keys": False, "separators": (",", ":"), "ensure_ascii": False}
PRETTY_JSON_KW = {"indent": 2, "ensure_ascii": False}

_TEXT_KEYS = (
    "name",
    "callsign",
    "password",
    "commissioned",
    "options_file",
    "picture_file",
    "patch_file",
    "personal_text",
    "squadron",
)
_FLOAT_KEYS = ("flight_hours", "ace_factor")


def to_dict(record: LogbookRecord) -> dict:
    out = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if f.name == "rank":
            value = value.name
        elif f.name == "medals":
            value = [m.value for m in record.sorted_medals()]
        elif f.name in ("dogfight_stats", "campaign_stats"):
            value = asdict(value)
        out[f.name] = value
    return out


def _expect(obj, typ, where: str, source: str | None):
    # bool is an int subclass; never accept it for a number
    if isinstance(obj, bool) and typ is not bool or not isinstance(obj, typ):
        raise TextFormatError(f"{where} must be {_type_name(typ)}, got {obj!r}", source)
    return obj


def _type_name(typ) -> str:
    if isinstance(typ, tuple):
        return " or ".join(t.__name__ for t in typ)
    return typ.__name__


def _check_keys(obj: dict, expected, where: str, source: str | None) -> None:
    expected = set(expected)
    missing = sorted(expected - obj.keys())
    unknown = sorted(obj.keys() - expected)
    if missing:
        raise TextFormatError(f"{where} is missing {', '.join(missing)}", source)
    if unknown:
        raise TextFormatError(f"{where} has unknown keys {', '.join(unknown)}", source)


def _stats(obj, cls, where: str, source: str | None):
    _expect(obj, dict, where, source)
    names = [f.name for f in fields(cls)]
    _check_keys(obj, names, where, source)
    return cls(**{n: _expect(obj[n], int, f"{where}.{n}", source) for n in names})


def from_dict(obj, source: str | None = None) -> LogbookRecord:
    """Build a record from its JSON object form, rejecting anything malformed."""
    _expect(obj, dict, "logbook", source)
    _check_keys(obj, [f.name for f in fields(LogbookRecord)], "logbook", source)

    values = {k: _expect(obj[k], str, k, source) for k in _TEXT_KEYS}
    for k in _FLOAT_KEYS:
        values[k] = float(_expect(obj[k], (int, float), k, source))

    rank = _expect(obj["rank"], str, "rank", source)
    try:
        values["rank"] = Rank[rank]
    except KeyError:
        raise TextFormatError(f"unknown rank {rank!r}", source) from None

    medals = set()
    for m in _expect(obj["medals"], list, "medals", source):
        try:
            medals.add(Medal(_expect(m, str, "medals[]", source)))
        except ValueError:
            raise TextFormatError(f"unknown medal {m!r}", source) from None
    values["medals"] = frozenset(medals)

    values["dogfight_stats"] = _stats(obj["dogfight_stats"], DogfightStats, "dogfight_stats", source)
    values["campaign_stats"] = _stats(obj["campaign_stats"], CampaignStats, "campaign_stats", source)
    values["voice"] = _expect(obj["voice"], int, "voice", source)
    return LogbookRecord(**values)


def dumps(record: LogbookRecord, pretty: bool = False) -> str:
    kw = PRETTY_JSON_KW if pretty else CANONICAL_JSON_KW
    return json.dumps(to_dict(record), **kw)


def loads(text: str, source: str | None = None) -> LogbookRecord:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise TextFormatError(f"invalid JSON: {e}", source) from e
    return from_dict(obj, source)
