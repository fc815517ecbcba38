"""
The one and only read buffer. A Buffer sits between a tube and its reader.
A reader is anything with a read(amt) function returning at most amt bytes,
and b'' once the stream is over::

    class MyReader(object):
        def read(self, amt):
            return b'x' * amt

Readers can also tell the Buffer how to wait for data, which is what makes
deadlines work. If the reader has a wait(timeout) function, it's called and
should return True when data (or EOF) is ready. Otherwise, if it has a
fileno(), we select() on it. Readers with neither are assumed to always be
ready, so deadlines can't interrupt them.

Nothing is consumed from the buffer until a caller asks for it with shift().
Scans only peek, so a receive that fails leaves the data where it was.
"""
import logging
import os
import select
import time

from bytetubes import errors

logger = logging.getLogger('bytetubes.buffer')

CHUNK_SIZE = int(os.environ.get("BYTETUBES_CHUNK_SIZE", 2**12))


def deadline_for(timeout):
    if timeout is None:
        return None
    return time.monotonic() + timeout


class Buffer(object):
    """
    Buffer accumulates chunks from a reader and hands them out on request.
    """

    def __init__(self, reader, chunk_size=CHUNK_SIZE):
        if not chunk_size:
            raise ValueError("no chunk size")
        self.reader = reader
        self.chunk_size = chunk_size
        self.buffer = bytearray()
        self.eof = False

    def __len__(self):
        return len(self.buffer)

    def readable(self, timeout):
        """
        readable waits up to timeout seconds for the reader to have something
        for us.
        """
        if hasattr(self.reader, 'wait'):
            return self.reader.wait(timeout)

        try:
            fd = self.reader.fileno()
        except (AttributeError, OSError, ValueError):
            return True
        if fd < 0:
            # closed, the read will say EOF
            return True

        ready, _, _ = select.select([fd], [], [], timeout)
        return bool(ready)

    def fill(self, deadline=None):
        """
        fill does a single read from the reader and appends the result. It
        returns False once the reader is exhausted.
        """
        if self.eof:
            return False

        if deadline is not None:
            remaining = max(0.0, deadline - time.monotonic())
            if not self.readable(remaining):
                raise errors.Timeout()

        chunk = self.reader.read(self.chunk_size)
        logger.debug("[%s] << %r", self.reader, chunk)
        if not chunk:
            self.eof = True
            return False

        self.buffer += chunk
        return True

    def ensure(self, amt, deadline=None):
        """
        ensure keeps filling until at least amt bytes are buffered. Raises
        IncompleteRead if the reader runs dry first.
        """
        while len(self.buffer) < amt:
            if not self.fill(deadline):
                raise errors.IncompleteRead(bytes(self.buffer), amt)

    def find(self, delim, deadline=None):
        """
        find returns the offset just past the first occurrence of delim,
        reading as much as it takes to get there.

        We look for the first byte of the delimiter, then peek at the
        len(delim) - 1 bytes after it. If they match the rest of the
        delimiter we're done, otherwise we keep looking from the byte after
        the hit. Since we peek at the buffer, a delimiter split over several
        reads is found just the same.
        """
        if not delim:
            raise errors.EmptyDelimiter()

        first, rest = delim[:1], delim[1:]
        start = 0
        while True:
            hit = self.buffer.find(first, start)
            if hit < 0:
                start = len(self.buffer)
                if not self.fill(deadline):
                    raise errors.IncompleteRead(bytes(self.buffer), delim)
                continue

            end = hit + len(delim)
            while len(self.buffer) < end:
                if not self.fill(deadline):
                    raise errors.IncompleteRead(bytes(self.buffer), delim)

            if self.buffer[hit + 1:end] == rest:
                return end

            start = hit + 1

    def shift(self, amt):
        """
        Remove amt bytes from the front of the buffer and return them.
        """
        r = bytes(self.buffer[:amt])
        del self.buffer[:amt]
        return r

    def read_some(self, amt, deadline=None):
        if amt and not self.buffer:
            self.fill(deadline)
        return self.shift(amt)

    def read_all(self):
        while self.fill():
            pass
        return self.shift(len(self.buffer))

    def discard(self):
        n = len(self.buffer)
        del self.buffer[:]
        return n


class StreamReader(object):
    """
    StreamReader makes a reader out of a file object. It reads with read1()
    when the stream has it, so we never block waiting for more than what's
    there.
    """

    def __init__(self, stream):
        self.stream = stream
        self.read = getattr(stream, 'read1', stream.read)

    def fileno(self):
        return self.stream.fileno()

    def __str__(self):
        return "<bytetubes.StreamReader(%r)>" % (self.stream,)
