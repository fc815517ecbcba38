"""
Everything that can go wrong inside a tube. Transport errors (socket errors,
broken pipes, HTTP errors) are not wrapped, they reach the caller as is.
"""


class TubeError(Exception):
    """
    TubeError is the base of all errors raised by bytetubes itself.
    """


class EmptyDelimiter(TubeError, ValueError):

    def __init__(self):
        super(EmptyDelimiter, self).__init__("Empty delimiter")


class InvalidProtocol(TubeError, ValueError):

    def __init__(self, proto):
        self.proto = proto
        super(InvalidProtocol, self).__init__("Invalid protocol: %r" % (proto,))


class IncompleteRead(TubeError, EOFError):
    """
    IncompleteRead is raised when the stream ends before a receive could be
    satisfied. `partial` holds what was available, `expected` what was asked
    for (a byte count, or the delimiter).
    """

    def __init__(self, partial, expected):
        self.partial = partial
        self.expected = expected
        super(IncompleteRead, self).__init__(
            "%d bytes read, %r expected" % (len(partial), expected)
        )


class Timeout(TubeError, TimeoutError):

    def __init__(self):
        super(Timeout, self).__init__("Timed out waiting for data")


class ShortWrite(TubeError, IOError):

    def __init__(self, written, expected):
        self.written = written
        self.expected = expected
        super(ShortWrite, self).__init__(
            "short write: %d of %d bytes" % (written, expected)
        )
