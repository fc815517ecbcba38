"""
Tubes over whatever byte stream you have lying around. To make your own,
define a stream class with a read(amt) function, and optionally write(chunk)
and close(), then decorate it with StreamFactory::

    @StreamFactory()
    class Zeros(object):
        def read(self, amt):
            return b'\\0' * amt

    t = Zeros(chunk_size=16)
    t.recvn(4)

Calling the factory builds the stream and returns a Tube reading from it.
Streams with a write() are writable, streams with a close() are closed by
the tube's close(). chunk_size and newline keywords are for the tube, the
rest goes to the stream class.
"""
import io
import logging

from requests import Request, Session
from urllib3.exceptions import ProtocolError

from bytetubes import buffer, errors, tube
from bytetubes.flat import flat

logger = logging.getLogger('bytetubes.streams')


def StreamFactory(default_chunk_size=buffer.CHUNK_SIZE):

    def wrapper(cls):
        return MakeStreamFactory(cls, default_chunk_size)

    return wrapper


class MakeStreamFactory(object):
    """
    MakeStreamFactory takes a stream class and returns a Tube factory.
    """

    def __init__(self, stream_cls, default_chunk_size=buffer.CHUNK_SIZE):
        self.stream_cls = stream_cls
        self.default_chunk_size = default_chunk_size

    def __call__(self, *args, **kwargs):
        chunk_size = self.default_chunk_size
        if kwargs.get("chunk_size"):
            chunk_size = kwargs["chunk_size"]
            del kwargs["chunk_size"]
        newline = kwargs.pop("newline", tube.NEWLINE)

        stream = self.stream_cls(*args, **kwargs)
        return tube.Tube(
            stream,
            stream if hasattr(stream, 'write') else None,
            newline=newline,
            close_fn=getattr(stream, 'close', None),
            chunk_size=chunk_size,
        )


@StreamFactory()
class IO(object):
    """
    IO reads from one file object and writes to another. Without a writer
    the tube is read only.
    """

    def __init__(self, reader, writer=None):
        self.reader = buffer.StreamReader(reader)
        self.writer = writer

    def read(self, amt):
        return self.reader.read(amt)

    def fileno(self):
        return self.reader.fileno()

    def write(self, chunk):
        if self.writer is None:
            raise io.UnsupportedOperation("IO stream has no writer")
        return self.writer.write(chunk)

    def flush(self):
        hasattr(self.writer, 'flush') and self.writer.flush()

    def __str__(self):
        return "<bytetubes.streams.IO(%r, %r)>" % (
            self.reader.stream, self.writer
        )


@StreamFactory()
class Bytes(object):
    """
    Bytes reads from fixed bytes and keeps whatever is written, see
    getvalue().
    """

    def __init__(self, byts=b''):
        self.io = io.BytesIO(flat(byts))
        self.out = io.BytesIO()

    def read(self, amt):
        return self.io.read(amt)

    def write(self, chunk):
        return self.out.write(chunk)

    def getvalue(self):
        return self.out.getvalue()


@StreamFactory()
class HTTP(object):
    """
    HTTP reads the body of an HTTP response as it streams in. It's read only.
    Responses with an error status raise requests.HTTPError.
    """

    def __init__(self, method, url, *args, **kwargs):
        self.url = url
        self.session = Session()
        r = Request(method, url, *args, **kwargs)
        self.response = self.session.send(r.prepare(), stream=True)
        try:
            self.response.raise_for_status()
        except Exception:
            logger.exception("%s %s failed", method, url)
            self.close()
            raise

        self.stream = self.response.raw
        self.read1 = getattr(self.stream, 'read1', self.stream.read)

    def read(self, amt):
        try:
            return self.read1(amt)
        except ProtocolError as e:
            raise errors.IncompleteRead(b'', amt) from e

    def close(self):
        self.response.close()
        self.session.close()

    def __str__(self):
        return "<bytetubes.streams.HTTP(%s)>" % (self.url,)
