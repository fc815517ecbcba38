"""
Run a shell in a tube, say hello, then hand it over to the terminal.
"""
import logging
logging.basicConfig(level=logging.WARN)
import signal

from bytetubes import signals
from bytetubes.process import Process

signals.handle_signals(signal.SIGTERM, signal.SIGHUP)

p = Process(["/bin/sh"])
print(p.sendlinethen(b"hello\n", "echo hello"))
p.interactive()
print("exit status %s" % (p.close(),))
