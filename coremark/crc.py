"""16-bit CRC helpers and numeric seed parsing."""

from itertools import takewhile

_DEC_DIGITS = "0123456789"
_HEX_DIGITS = "0123456789abcdef"


def _to_s32(value):
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def crcu8(data, crc):
    """Feed the low eight bits of ``data`` into the 16-bit ``crc``."""
    data &= 0xFF
    crc &= 0xFFFF
    for _ in range(8):
        if (data ^ crc) & 1:
            crc = ((crc ^ 0x4002) >> 1) | 0x8000
        else:
            crc >>= 1
        data >>= 1
    return crc


def crcu16(newval, crc):
    """Feed a 16-bit value into ``crc``, low byte first."""
    crc = crcu8(newval & 0xFF, crc)
    return crcu8((newval >> 8) & 0xFF, crc)


def crc16(newval, crc):
    """Feed a signed 16-bit value into ``crc``."""
    return crcu16(newval & 0xFFFF, crc)


def crcu32(newval, crc):
    """Feed a 32-bit value into ``crc``, low half first."""
    newval &= 0xFFFFFFFF
    crc = crc16(newval, crc)
    return crc16(newval >> 16, crc)


def parseval(text):
    """Parse a decimal or ``0x`` hex number with optional ``K``/``M`` suffix.

    Parsing stops at the first character that is not a digit of the base;
    hex digits must be lower case. The result wraps to a signed 32-bit value.
    """
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    digits, base = _DEC_DIGITS, 10
    if text.startswith("0x"):
        text = text[2:]
        digits, base = _HEX_DIGITS, 16
    lead = "".join(takewhile(digits.__contains__, text))
    value = int(lead, base) if lead else 0
    rest = text[len(lead):]
    if rest.startswith("K"):
        value *= 1024
    elif rest.startswith("M"):
        value *= 1024 * 1024
    if negative:
        value = -value
    return _to_s32(value)


def get_seed_args(i, argv):
    """Return argument ``i`` of ``argv`` parsed as a number, or 0 if absent."""
    if len(argv) > i:
        return parseval(argv[i])
    return 0