"""
flat turns the values tube operations accept into bytes. A value is one of:

 - bytes-like (bytes, bytearray, memoryview), used as is.
 - an int between 0 and 255, a single byte.
 - a str, a character or some text, encoded as UTF-8.

Anything else is a programming error and raises TypeError.
"""

ENCODING = 'utf-8'


def flat(value):
    if isinstance(value, bytes):
        return value

    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)

    if isinstance(value, bool):
        raise TypeError("can't convert bool to bytes")

    if isinstance(value, int):
        if not 0 <= value <= 0xff:
            raise ValueError("byte value out of range: %d" % value)
        return bytes((value,))

    if isinstance(value, str):
        return value.encode(ENCODING)

    raise TypeError("can't convert %s to bytes" % type(value).__name__)
