"""Falcon logbook on-disk constants.

Single source of truth for obfuscation keys and record layout widths.
Keep this file stable. Reader and writer must remain synchronized.
"""

# Stream obfuscation
MASTER_KEY = b"Falcon is your Master\x00"  # 22 bytes, repeats over the stream
INITIAL_STATE = 0x58                      # feedback register at offset 0

# Password scramble masks (applied to content positions only)
PASSWORD_MASK_1 = b"Who needs a password!\x00"      # 22 bytes
PASSWORD_MASK_2 = b"Pilots, grab a parachute\x00"   # 25 bytes

# Text content widths (on disk: width + 1 terminator byte)
NAME_LEN = 20
CALLSIGN_LEN = 12
PASSWORD_LEN = 10
COMM_LEN = 12
FILENAME_LEN = 32
PERSONAL_TEXT_LEN = 120
# Squadron is stored as exactly NAME_LEN bytes with no terminator
SQUADRON_LEN = NAME_LEN

TEXT_ENCODING = "utf-8"

# Numeric fields, little-endian
F32_FMT = "<f"
I32_FMT = "<i"
I16_FMT = "<h"
U32_FMT = "<I"

# Stats blocks: 8 x int16, and 4 x int16 | 2 x int32 | 11 x int16
DOGFIGHT_FMT = "<8h"
CAMPAIGN_FMT = "<4h2i11h"

MEDAL_COUNT = 6
RESOURCE_ID_LEN = 4
SENTINEL = 0

ALIGNMENT = 4
RECORD_LEN = 372

VOICE_MIN = 0
VOICE_MAX = 11
