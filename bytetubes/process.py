"""
Process tubes run a command and talk to it over its standard streams::

    p = Process(["/bin/sh"])
    p.sendline("echo hi")
    p.recvline()  # b"hi\\n"
    p.close()

What the process writes to stdout and stderr comes out of the same tube, in
the order it arrived. stderr is also copied to our own stderr as it comes in,
so diagnostics show up even if nobody is reading the tube.

close() gives the process CLOSE_GRACE seconds to exit after its stdin is
closed, then kills it.
"""
import collections
import logging
import os
import subprocess
import sys
import threading

from bytetubes import buffer, signals, tube

logger = logging.getLogger('bytetubes.process')

CLOSE_GRACE = float(os.environ.get("BYTETUBES_CLOSE_GRACE", 1.0))


class MergedReader(object):
    """
    MergedReader is a reader fed by several pumps. Chunks come out in the
    order they were put in. EOF is reached once every pump is done.
    """

    def __init__(self, pumps):
        self.pending = pumps
        self.chunks = collections.deque()
        self.lock = threading.Condition()

    def put(self, chunk):
        with self.lock:
            self.chunks.append(chunk)
            self.lock.notify_all()

    def done(self):
        with self.lock:
            self.pending -= 1
            self.lock.notify_all()

    def ready(self):
        return bool(self.chunks) or self.pending <= 0

    def wait(self, timeout=None):
        with self.lock:
            return self.lock.wait_for(self.ready, timeout)

    def read(self, amt):
        with self.lock:
            self.lock.wait_for(self.ready)
            if not self.chunks:
                return b''

            chunk = self.chunks.popleft()
            if len(chunk) > amt:
                self.chunks.appendleft(chunk[amt:])
                chunk = chunk[:amt]
            return chunk


def mirror(chunk):
    err = getattr(sys.stderr, 'buffer', None)
    if err is not None:
        err.write(chunk)
    else:
        sys.stderr.write(chunk.decode('utf-8', 'replace'))
    sys.stderr.flush()


def pump(stream, merged, copy_to=None):
    """
    pump moves everything from stream into merged, and hands each chunk to
    copy_to as well, if given.
    """
    try:
        chunk = stream.read(buffer.CHUNK_SIZE)
        while chunk:
            if copy_to:
                copy_to(chunk)
            merged.put(chunk)
            chunk = stream.read(buffer.CHUNK_SIZE)
    except (OSError, ValueError):
        logger.exception("Pump failed")
    finally:
        stream.close()
        merged.done()


class Process(tube.Tube):
    """
    Process is a Tube over a child process.
    """

    def __init__(self, argv, cwd=None, env=None, newline=tube.NEWLINE,
                 chunk_size=buffer.CHUNK_SIZE):
        if isinstance(argv, (str, bytes)):
            argv = [argv]
        self.argv = list(argv)
        self.proc = subprocess.Popen(
            self.argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
            cwd=cwd,
            env=env,
        )
        logger.info("Started %s, pid %d", self.argv, self.proc.pid)

        merged = MergedReader(2)
        self.pumps = [
            threading.Thread(
                target=pump, args=(self.proc.stdout, merged), daemon=True
            ),
            threading.Thread(
                target=pump,
                args=(self.proc.stderr, merged, mirror),
                daemon=True
            ),
        ]
        for t in self.pumps:
            t.start()

        super(Process, self).__init__(
            merged, self.proc.stdin, newline=newline, chunk_size=chunk_size
        )
        self.closed = False
        self.killed = False
        self.close_lock = threading.RLock()
        signals.register(self.close)

    @property
    def pid(self):
        return self.proc.pid

    def close(self):
        """
        close closes the child's stdin and waits up to CLOSE_GRACE seconds
        for it to exit. If it doesn't, it's killed. Returns the exit status,
        which is minus the signal number for a killed process.
        """
        with self.close_lock:
            if self.closed:
                return self.proc.returncode
            self.closed = True
            signals.unregister(self.close)

            self.proc.stdin.close()
            try:
                status = self.proc.wait(timeout=CLOSE_GRACE)
                logger.info("%r exited with %s", self, status)
                return status
            except subprocess.TimeoutExpired:
                logger.info("%r still running after %ss, killing it", self,
                            CLOSE_GRACE)

            self.proc.kill()
            self.killed = True
            return self.proc.wait()

    def __repr__(self):
        return "<bytetubes.Process(%s) pid=%d>" % (self.argv, self.proc.pid)
