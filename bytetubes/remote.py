"""
Remote tubes talk to a network service::

    r = Remote("127.0.0.1", 8080)
    r.sendline("hello")
    r.recvline(keepends=False)

Only tcp and udp are spoken. Asking for anything else fails before we touch
the network.

A udp read returns at most one datagram, and whatever doesn't fit in the
read is lost. udp tubes therefore read at least MAX_DATAGRAM bytes at a time,
whatever chunk_size says.
"""
import errno
import logging
import socket

from bytetubes import buffer, errors, tube

logger = logging.getLogger('bytetubes.remote')

PROTOCOLS = frozenset(['tcp', 'udp'])

MAX_DATAGRAM = 65535

SOCKET_TYPES = {
    'tcp': socket.SOCK_STREAM,
    'udp': socket.SOCK_DGRAM,
}


def dial(host, port, proto):
    """
    dial connects to every address host resolves to until one answers. The
    last failure is raised if none do.
    """
    if not 0 < port < 65536:
        raise OSError(errno.EINVAL, "invalid port %r" % (port,))

    err = None
    for family, socktype, protonum, _, addr in socket.getaddrinfo(
        host, port, 0, SOCKET_TYPES[proto]
    ):
        sock = socket.socket(family, socktype, protonum)
        try:
            sock.connect(addr)
            return sock
        except OSError as e:
            logger.debug("Connecting to %s failed: %s", addr, e)
            sock.close()
            err = e

    if err is None:
        raise OSError("getaddrinfo returned nothing for %s" % (host,))
    raise err


class Connection(object):
    """
    Connection is the reader and writer for a connected socket. Reading
    from a socket that has been closed under us is EOF.
    """

    def __init__(self, sock):
        self.sock = sock

    def read(self, amt):
        if self.sock.fileno() < 0:
            return b''
        try:
            return self.sock.recv(amt)
        except OSError as e:
            if e.errno != errno.EBADF:
                raise
            logger.debug("%s closed while reading", self)
            return b''

    def write(self, data):
        self.sock.sendall(data)
        return len(data)

    def fileno(self):
        return self.sock.fileno()

    def __str__(self):
        return "<bytetubes.Connection(%s)>" % (self.sock.fileno(),)


class Remote(tube.Tube):
    """
    Remote is a Tube over a network connection.
    """

    def __init__(self, host, port, proto='tcp', newline=tube.NEWLINE,
                 chunk_size=buffer.CHUNK_SIZE):
        if proto not in PROTOCOLS:
            raise errors.InvalidProtocol(proto)

        self.host = host
        self.port = int(port)
        self.proto = proto
        self.sock = dial(host, self.port, proto)
        logger.info("Connected to %s:%d/%s", host, self.port, proto)

        if proto == 'udp':
            chunk_size = max(chunk_size, MAX_DATAGRAM)

        conn = Connection(self.sock)
        super(Remote, self).__init__(
            conn, conn, newline=newline, chunk_size=chunk_size
        )

    def close(self):
        """
        close shuts the connection down, which wakes up anyone blocked
        reading from it, then closes it.
        """
        if self.sock.fileno() < 0:
            return
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # ENOTCONN when the peer is already gone
            logger.debug("%r shutdown: %s", self, e)
        return self.sock.close()

    def __repr__(self):
        return "<bytetubes.Remote(%s:%d/%s)>" % (
            self.host, self.port, self.proto
        )
