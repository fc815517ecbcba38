"""
Cleanup on the way out. Anything that owns something outside of Python, like
a child process, registers its close function here while it's alive. Call
handle_signals() in your program to run them when a signal arrives::

    from bytetubes import signals
    signals.handle_signals(signal.SIGTERM, signal.SIGINT, signal.SIGHUP)

Nothing is installed on import.

Bound methods are held weakly, so registering obj.close doesn't keep obj
alive. Once obj is garbage collected its handler is gone too.
"""
import logging
import signal
import sys
import weakref

logger = logging.getLogger('bytetubes.signals')

HANDLERS = []


def reference(fn):
    try:
        return weakref.WeakMethod(fn)
    except TypeError:
        # plain functions and lambdas are held strongly
        return lambda: fn


def registered():
    """
    registered returns the handlers that are still alive.
    """
    return [fn for fn in (ref() for ref in HANDLERS) if fn is not None]


def register(fn):
    HANDLERS.append(reference(fn))


def unregister(fn):
    HANDLERS[:] = [ref for ref in HANDLERS if ref() not in (None, fn)]


def run_handlers():
    for handle in registered():
        handle()



def handle_signals(*signals):

    def handle(*args, **kwargs):
        try:
            run_handlers()
        except Exception:
            logger.exception("Signal handlers failed")
            sys.exit(1)

        sys.exit(130)

    for sig in signals:
        signal.signal(sig, handle)
