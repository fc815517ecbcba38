"""
Interactive mode hands a tube over to whoever sits at the terminal. Two
threads do the work:

 - one copies everything the tube says to the terminal, until EOF.
 - one reads the terminal line by line and sends each line down the tube.

They share a single cancel flag. When the tube hits EOF, or either side
fails, the flag goes up and the terminal side closes the tube the next time
it looks, instead of sending another line. When the terminal runs out of
input, the tube is closed too, and the tube side sees EOF soon after.

interact() returns once both sides are done and raises the first failure,
if there was one.
"""
import logging
import os
import sys
import threading
from concurrent import futures

from bytetubes import buffer, errors

logger = logging.getLogger('bytetubes.interactive')

POLL_INTERVAL = float(os.environ.get("BYTETUBES_POLL_INTERVAL", 0.1))

SWITCHING = b"Switching to interactive mode...\n"
GOT_EOF = b"Got EOF while reading in interactive\n"


def write(stream, data):
    stream.write(data)
    hasattr(stream, 'flush') and stream.flush()


def tube_to_terminal(tube, stdout, cancel):
    data = tube.recv()
    while data:
        write(stdout, data)
        data = tube.recv()

    write(stdout, GOT_EOF)
    cancel.set()


def terminal_to_tube(tube, stdin, cancel):
    term = buffer.Buffer(buffer.StreamReader(stdin))
    while not cancel.is_set():
        try:
            end = term.find(b'\n', buffer.deadline_for(POLL_INTERVAL))
        except errors.Timeout:
            continue
        except errors.IncompleteRead as e:
            # last line without a newline
            if e.partial and not cancel.is_set():
                tube.sendline(term.shift(len(e.partial)))
            break

        if cancel.is_set():
            break
        tube.sendline(term.shift(end)[:-1])

    logger.debug("[%r] terminal side done, closing", tube)
    tube.close()


def run(cancel, fn, *args):
    try:
        return fn(*args)
    except Exception:
        logger.exception("Interactive %s failed", fn.__name__)
        cancel.set()
        raise


def interact(tube, stdin=None, stdout=None):
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout.buffer
    write(stdout, SWITCHING)

    cancel = threading.Event()
    failure = None
    with futures.ThreadPoolExecutor(
        max_workers=2, thread_name_prefix='bytetubes-interactive'
    ) as pool:
        running = [
            pool.submit(run, cancel, tube_to_terminal, tube, stdout, cancel),
            pool.submit(run, cancel, terminal_to_tube, tube, stdin, cancel),
        ]
        for done in futures.as_completed(running):
            if failure is None:
                failure = done.exception()

    if failure is not None:
        raise failure
