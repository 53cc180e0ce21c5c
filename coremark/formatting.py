"""Small printf-style formatter and ecvt/fcvt digit conversion."""

import math
from enum import IntFlag

CVTBUFSIZE = 80

_LOWER = "0123456789abcdefghijklmnopqrstuvwxyz"
_UPPER = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_POINTER_WIDTH = 16


class _Flag(IntFlag):
    ZEROPAD = 1
    SIGN = 2
    PLUS = 4
    SPACE = 8
    LEFT = 16
    HEX_PREP = 32
    UPPERCASE = 64


_FLAG_CHARS = {
    "-": _Flag.LEFT,
    "+": _Flag.PLUS,
    " ": _Flag.SPACE,
    "#": _Flag.HEX_PREP,
    "0": _Flag.ZEROPAD,
}


def _digits_text(digits):
    return "".join(chr(0x30 + d) for d in digits)


def _cvt(arg, ndigits, eflag):
    arg = float(arg)
    if not math.isfinite(arg):
        raise ValueError("cannot convert a non-finite number")
    ndigits = min(max(ndigits, 0), CVTBUFSIZE - 2)
    negative = arg < 0
    arg = abs(arg)
    arg, fi = math.modf(arg)
    buf = []
    r2 = 0
    if fi != 0:
        int_digits = []
        while fi != 0:
            fj, fi = math.modf(fi / 10)
            int_digits.append(int((fj + 0.03) * 10))
            r2 += 1
        if r2 > CVTBUFSIZE:
            raise OverflowError("integer part too long to convert")
        buf = int_digits[::-1]
    elif arg > 0:
        while (fj := arg * 10) < 1:
            arg = fj
            r2 -= 1

    p1 = ndigits if eflag else ndigits + r2
    decpt = r2
    if p1 < 0:
        return "", decpt, negative
    while len(buf) <= p1 and len(buf) < CVTBUFSIZE:
        arg, fj = math.modf(arg * 10)
        buf.append(int(fj))
    if p1 >= CVTBUFSIZE:
        return _digits_text(buf[:CVTBUFSIZE - 1]), decpt, negative

    p = p1
    buf[p1] += 5
    while buf[p1] > 9:
        buf[p1] = 0
        if p1 > 0:
            p1 -= 1
            buf[p1] += 1
        else:
            buf[p1] = 1
            decpt += 1
            if not eflag:
                if p > 0:
                    buf[p] = 0
                p += 1
    return _digits_text(buf[:p]), decpt, negative


def ecvt(arg, ndigits):
    """Return ``(digits, decpt, negative)`` with ``ndigits`` significant digits.

    The value is ``0.digits * 10**decpt``; rounding is half up.
    """
    return _cvt(arg, ndigits, True)


def fcvt(arg, ndigits):
    """Return ``(digits, decpt, negative)`` with ``ndigits`` digits after the point."""
    return _cvt(arg, ndigits, False)


def _sign_char(negative, flags, size):
    if flags & _Flag.SIGN:
        if negative:
            return "-", size - 1
        if flags & _Flag.PLUS:
            return "+", size - 1
        if flags & _Flag.SPACE:
            return " ", size - 1
    return "", size


def _layout(lead, body, size, fill, flags):
    pad = max(size, 0)
    if flags & _Flag.LEFT:
        return lead + body + " " * pad
    if flags & _Flag.ZEROPAD:
        return lead + fill * pad + body
    return " " * pad + lead + body


def _number(num, base, size, precision, flags):
    dig = _UPPER if flags & _Flag.UPPERCASE else _LOWER
    if flags & _Flag.LEFT:
        flags &= ~_Flag.ZEROPAD
    fill = "0" if flags & _Flag.ZEROPAD else " "
    sign, size = _sign_char(num < 0, flags, size)
    num = abs(num)

    prefix = ""
    if flags & _Flag.HEX_PREP:
        if base == 16:
            prefix = "0x"
            size -= 2
        elif base == 8:
            prefix = "0"
            size -= 1

    chars = []
    while num:
        num, rem = divmod(num, base)
        chars.append(dig[rem])
    text = "".join(reversed(chars)) or "0"

    precision = max(precision, len(text))
    size -= precision
    body = "0" * (precision - len(text)) + text
    return _layout(sign + prefix, body, size, fill, flags)


def _pad_text(text, size, flags):
    pad = max(size - len(text), 0)
    return text + " " * pad if flags & _Flag.LEFT else " " * pad + text


def _address(addr, count):
    octets = bytes(addr)
    if len(octets) < count:
        raise ValueError(f"address needs {count} bytes, got {len(octets)}")
    return octets[:count]


def _mac_address(addr, size, flags):
    dig = _UPPER if flags & _Flag.UPPERCASE else _LOWER
    text = ":".join(dig[b >> 4] + dig[b & 0x0F] for b in _address(addr, 6))
    return _pad_text(text, size, flags)


def _ip_address(addr, size, flags):
    text = ".".join(str(b) for b in _address(addr, 4))
    return _pad_text(text, size, flags)


def _fixed(value, precision):
    digits, decpt, negative = fcvt(value, precision)
    lead = "-" if negative else ""
    if not digits:
        tail = "." + "0" * precision if precision > 0 else ""
        return lead + "0" + tail
    if decpt <= 0:
        return lead + "0." + "0" * (-decpt) + digits
    if decpt >= len(digits):
        return lead + digits
    return lead + digits[:decpt] + "." + digits[decpt:]


def _float(num, size, precision, flags):
    num = float(num)
    if flags & _Flag.LEFT:
        flags &= ~_Flag.ZEROPAD
    fill = "0" if flags & _Flag.ZEROPAD else " "
    sign, size = _sign_char(num < 0, flags, size)
    num = abs(num) if num < 0 else num
    if precision < 0:
        precision = 6
    text = _fixed(num, precision)
    if flags & _Flag.HEX_PREP and precision == 0 and "." not in text:
        text += "."
    size -= len(text)
    return _layout(sign, text, size, fill, flags)


def _char(value):
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c requires an int or a single character")
        return value
    return chr(int(value) & 0xFF)


def _s32(value):
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _s64(value):
    value &= _MASK64
    return value - (1 << 64) if value & (1 << 63) else value


def _is_digit(ch):
    return "0" <= ch <= "9" and ch != ""


def sprintf(fmt, *args):
    """Format ``args`` according to ``fmt`` and return the text.

    Supports the flags ``-+ #0``, a width and precision (given as digits or
    ``*``), the ``l``/``L`` qualifier and the conversions ``c s p a A o x X
    d i u f``. Integers wrap to 32 bits (64 with ``l``); ``%a`` prints a
    dotted IPv4 address and ``%la`` a colon separated MAC address from
    bytes. Unknown conversions are copied through unchanged.
    """
    values = iter(args)

    def take():
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    length = len(fmt)

    def at(k):
        return fmt[k] if k < length else ""

    out = []
    i = 0
    while i < length:
        ch = fmt[i]
        i += 1
        if ch != "%":
            out.append(ch)
            continue

        flags = _Flag(0)
        while (flag := _FLAG_CHARS.get(at(i))) is not None:
            flags |= flag
            i += 1

        field_width = -1
        if _is_digit(at(i)):
            start = i
            while _is_digit(at(i)):
                i += 1
            field_width = int(fmt[start:i])
        elif at(i) == "*":
            i += 1
            field_width = int(take())
            if field_width < 0:
                field_width = -field_width
                flags |= _Flag.LEFT

        precision = -1
        if at(i) == ".":
            i += 1
            if _is_digit(at(i)):
                start = i
                while _is_digit(at(i)):
                    i += 1
                precision = int(fmt[start:i])
            elif at(i) == "*":
                i += 1
                precision = int(take())
            precision = max(precision, 0)

        qualifier = ""
        if at(i) in ("l", "L") and at(i):
            qualifier = at(i)
            i += 1

        conv = at(i)
        if conv:
            i += 1
        base = 10

        if conv == "c":
            pad = " " * max(field_width - 1, 0)
            char = _char(take())
            out.append(char + pad if flags & _Flag.LEFT else pad + char)
            continue
        if conv == "s":
            text = take()
            text = "<NULL>" if text is None else str(text)
            text = text.split("\0", 1)[0]
            if precision >= 0:
                text = text[:precision]
            out.append(_pad_text(text, field_width, flags))
            continue
        if conv == "p":
            if field_width == -1:
                field_width = _POINTER_WIDTH
                flags |= _Flag.ZEROPAD
            out.append(_number(int(take()) & _MASK64, 16, field_width,
                               precision, flags))
            continue
        if conv in ("a", "A"):
            if conv == "A":
                flags |= _Flag.UPPERCASE
            render = _mac_address if qualifier == "l" else _ip_address
            out.append(render(take(), field_width, flags))
            continue
        if conv == "f":
            out.append(_float(take(), field_width, precision, flags | _Flag.SIGN))
            continue
        if conv == "o":
            base = 8
        elif conv in ("x", "X"):
            if conv == "X":
                flags |= _Flag.UPPERCASE
            base = 16
        elif conv in ("d", "i"):
            flags |= _Flag.SIGN
        elif conv != "u":
            if conv != "%":
                out.append("%")
            out.append(conv)
            continue

        value = int(take())
        if qualifier == "l":
            value = _s64(value) if flags & _Flag.SIGN else value & _MASK64
        else:
            value = _s32(value) if flags & _Flag.SIGN else value & _MASK32
        out.append(_number(value, base, field_width, precision, flags))

    return "".join(out)