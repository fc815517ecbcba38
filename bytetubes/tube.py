"""
This is where all the talking happens. A Tube wraps a reader and a writer
and lets you speak in lines, delimiters and byte counts instead of chunks::

    t = Tube(reader, writer)
    t.sendlineafter(b"login: ", "bob")
    banner = t.recvuntil(b"$ ")

Anything we send or wait for can be bytes, a single byte as an int, or text,
see bytetubes.flat.

Tubes don't know how to release what they wrap. Whoever builds the tube
passes a close_fn, or overrides close() like Process and Remote do.
"""
import io
import logging

from bytetubes import buffer, errors, interactive
from bytetubes.flat import flat

logger = logging.getLogger('bytetubes.tube')

NEWLINE = b'\n'


class Tube(object):
    """
    Tube is a delimiter aware, buffered byte stream over a reader and an
    optional writer.
    """

    def __init__(self, reader, writer=None, newline=NEWLINE, close_fn=None,
                 chunk_size=buffer.CHUNK_SIZE):
        self.reader = reader
        self.writer = writer
        self.buffer = buffer.Buffer(reader, chunk_size)
        self.newline = newline
        self.close_fn = close_fn

    @property
    def newline(self):
        return self._newline

    @newline.setter
    def newline(self, value):
        value = flat(value)
        if len(value) != 1:
            raise ValueError("newline must be a single byte, got %r" % value)
        self._newline = value

    def recv(self, numb=None):
        """
        recv returns whatever is available, up to numb bytes, waiting only
        if nothing is. Returns b'' at EOF.
        """
        if numb is None:
            numb = self.buffer.chunk_size
        return self.buffer.read_some(numb)

    def recvn(self, numb, timeout=None):
        """
        recvn returns exactly numb bytes. If timeout seconds pass first,
        Timeout is raised and whatever arrived stays buffered for the next
        receive.
        """
        self.buffer.ensure(numb, buffer.deadline_for(timeout))
        return self.buffer.shift(numb)

    def recvuntil(self, delims, drop=False):
        delim = flat(delims)
        end = self.buffer.find(delim)
        data = self.buffer.shift(end)
        if drop:
            return data[:-len(delim)]
        return data

    def recvline(self, keepends=True):
        return self.recvuntil(self.newline, drop=not keepends)

    def recvlines(self, numlines, keepends=False):
        """
        recvlines returns numlines lines, or raises. Lines read before the
        failure are consumed but not returned.
        """
        return [self.recvline(keepends) for _ in range(numlines)]

    def recvall(self):
        return self.buffer.read_all()

    def send(self, data):
        if self.writer is None:
            raise io.UnsupportedOperation("%r is not writable" % (self,))

        data = flat(data)
        written = self.writer.write(data)
        if written is not None and written < len(data):
            raise errors.ShortWrite(written, len(data))
        if hasattr(self.writer, 'flush'):
            self.writer.flush()

        logger.debug("[%r] >> %r", self, data)
        return data

    def sendline(self, data):
        return self.send(flat(data) + self.newline)

    def sendafter(self, delim, data):
        self.recvuntil(delim)
        return self.send(data)

    def sendlineafter(self, delim, data):
        return self.sendafter(delim, flat(data) + self.newline)

    def sendthen(self, delim, data):
        self.send(data)
        return self.recvuntil(delim)

    def sendlinethen(self, delim, data):
        return self.sendthen(delim, flat(data) + self.newline)

    def clean(self):
        """
        clean throws away what's already buffered. It never reads.
        """
        n = self.buffer.discard()
        logger.debug("[%r] discarded %d bytes", self, n)

    def interactive(self, stdin=None, stdout=None):
        return interactive.interact(self, stdin, stdout)

    def close(self):
        if self.close_fn:
            return self.close_fn()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return "<bytetubes.Tube(%s)>" % (self.reader,)
