"""
bytetubes lets you talk to things that speak bytes. A child process, a
server on the other side of a socket, an HTTP response, a file. They all look
the same once they're in a tube.

A tube is a reader, a writer and a buffer in between. Most people just want
to wait for something and answer it::

    from bytetubes.process import Process

    p = Process(["python3", "-i"])
    p.sendlineafter(b">>> ", "1 + 1")
    p.recvline()

    from bytetubes.remote import Remote

    r = Remote("127.0.0.1", 4000)
    r.sendline("hello")
    r.recvuntil(b"\\n", drop=True)

Receiving
=========

 - recv() gives you whatever is there.
 - recvn(n) gives you exactly n bytes, optionally with a deadline.
 - recvuntil(delim) gives you everything up to, and with, delim. Pass
   drop=True to leave the delimiter off.
 - recvline() and recvlines(n) are recvuntil with the tube's newline.
 - recvall() reads until the other side is done.

If the stream ends before a receive is satisfied, IncompleteRead is raised
and nothing is taken out of the buffer, so you can still recvall() what was
left.

Sending
=======

send, sendline, and the after/then flavors that wait for a prompt before or
after sending. They all return exactly what was written.

Interactive
===========

tube.interactive() hooks the tube up to your terminal until one of you hangs
up.

Making your own
===============

See bytetubes.streams. A stream class with read(amt), and maybe write(chunk)
and close(), is all it takes.

Things You Can't do with bytetubes
==================================

 - TLS
 - talk to several tubes at once from one thread
 - async programming
"""
import pkgutil

try:
    version = pkgutil.get_data(__name__, 'VERSION').decode('utf-8')
except IOError:  # pragma: no cover
    version = '9999'

__version__ = version
