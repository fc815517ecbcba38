import io
import logging
import socket
import unittest

from bytetubes import errors, streams
from bytetubes.remote import Connection
from bytetubes.tube import Tube

logger = logging.getLogger("bytetubes.test_tube")

LINES = b"Foo\nBar\r\nBaz\n"


class ShortWriter(object):

    def write(self, data):
        return 1


class RecvTestCase(unittest.TestCase):

    def testRecvn(self):
        t = streams.Bytes(b"hello world")
        self.assertEqual(b"hello world", t.recvn(11))

    def testRecvnIncomplete(self):
        t = streams.Bytes(b"hello")
        with self.assertRaises(errors.IncompleteRead) as ctx:
            t.recvn(10)
        self.assertEqual(b"hello", ctx.exception.partial)
        self.assertEqual(10, ctx.exception.expected)
        self.assertEqual(b"hello", t.recvall())

    def testRecvnTimeout(self):
        a, b = socket.socketpair()
        self.addCleanup(a.close)
        self.addCleanup(b.close)
        conn = Connection(a)
        t = Tube(conn, conn)

        b.sendall(b"ab")
        with self.assertRaises(errors.Timeout):
            t.recvn(4, timeout=0.2)

        b.sendall(b"cd")
        self.assertEqual(b"abcd", t.recvn(4, timeout=5))

    def testRecvuntilEmptyDelimiter(self):
        t = streams.Bytes(b"")
        with self.assertRaises(errors.EmptyDelimiter):
            t.recvuntil(b"")
        with self.assertRaises(errors.EmptyDelimiter):
            t.recvuntil("")

        t = streams.Bytes(b"Hello World!")
        with self.assertRaises(errors.EmptyDelimiter):
            t.recvuntil(b"")
        self.assertEqual(b"Hello World!", t.recvall())

    def testRecvuntilEOF(self):
        t = streams.Bytes(b"")
        with self.assertRaises(errors.IncompleteRead):
            t.recvuntil(" ")

    def testRecvuntil(self):
        t = streams.Bytes(b"Hello World!")
        self.assertEqual(b"Hello ", t.recvuntil(" "))
        self.assertEqual(b"World!", t.recvn(6))

        t = streams.Bytes(b"Hello World!")
        self.assertEqual(b"Hello Wor", t.recvuntil(" Wor"))
        self.assertEqual(b"ld!", t.recvn(3))

        t = streams.Bytes(b"Hello World!")
        self.assertEqual(b"Hello", t.recvuntil(" Wor", drop=True))
        self.assertEqual(b"ld!", t.recvn(3))

        t = streams.Bytes(b"Hello|World")
        self.assertEqual(b"Hello", t.recvuntil(ord("|"), drop=True))
        self.assertEqual(b"World", t.recvn(5))

    def testRecvuntilRepeatedFirstByte(self):
        t = streams.Bytes(b"aaab-rest")
        self.assertEqual(b"aaab", t.recvuntil(b"aab"))
        self.assertEqual(b"-rest", t.recvall())

        t = streams.Bytes(b"xx<<<end>>>yy")
        self.assertEqual(b"xx<<", t.recvuntil(b"<end>", drop=True))
        self.assertEqual(b">>yy", t.recvall())

    def testRecvuntilSplitAcrossReads(self):
        for chunk_size in (1, 2, 3, 5, 64):
            t = streams.Bytes(b"foo<END>bar<END>", chunk_size=chunk_size)
            self.assertEqual(b"foo", t.recvuntil(b"<END>", drop=True))
            self.assertEqual(b"bar<END>", t.recvuntil(b"<END>"))
            self.assertEqual(b"", t.recvall())

    def testRecvuntilPartialMatchAtEOF(self):
        t = streams.Bytes(b"foo<EN", chunk_size=2)
        with self.assertRaises(errors.IncompleteRead) as ctx:
            t.recvuntil(b"<END>")
        self.assertEqual(b"foo<EN", ctx.exception.partial)
        self.assertEqual(b"foo<EN", t.recvall())

    def testRecvline(self):
        t = streams.Bytes(LINES)
        self.assertEqual(b"Foo\n", t.recvline())
        self.assertEqual(b"Bar\r\n", t.recvline(keepends=True))
        self.assertEqual(b"Baz", t.recvline(keepends=False))

    def testRecvlineEmpty(self):
        t = streams.Bytes(b"\nlast")
        self.assertEqual(b"", t.recvline(keepends=False))
        with self.assertRaises(errors.IncompleteRead) as ctx:
            t.recvline(keepends=False)
        self.assertEqual(b"last", ctx.exception.partial)

    def testRecvlineNewline(self):
        t = streams.Bytes(b"one\rtwo\r", newline=b"\r")
        self.assertEqual([b"one", b"two"], t.recvlines(2))

    def testRecvlines(self):
        expected = LINES.split(b"\n")

        t = streams.Bytes(LINES)
        lines = t.recvlines(3)
        self.assertEqual(expected[:3], lines)

        t = streams.Bytes(LINES)
        lines = t.recvlines(3, keepends=True)
        self.assertEqual([line + b"\n" for line in expected[:3]], lines)

        with self.assertRaises(errors.IncompleteRead):
            t.recvlines(1)

    def testRecvlinesTooMany(self):
        t = streams.Bytes(b"a\nb\n")
        lines = None
        with self.assertRaises(errors.IncompleteRead):
            lines = t.recvlines(3)
        self.assertIsNone(lines)
        self.assertEqual(b"", t.recvall())

    def testRecvall(self):
        t = streams.Bytes(LINES, chunk_size=2)
        self.assertEqual(b"Foo\n", t.recvline())
        self.assertEqual(LINES[4:], t.recvall())
        self.assertEqual(b"", t.recvall())

    def testRecv(self):
        t = streams.Bytes(b"Hello World", chunk_size=4)
        self.assertEqual(b"He", t.recv(2))
        self.assertEqual(b"ll", t.recv())
        self.assertEqual(b"o Wo", t.recv())
        self.assertEqual(b"rld", t.recv())
        self.assertEqual(b"", t.recv())

    def testRecvZero(self):
        t = streams.Bytes(b"Hello", chunk_size=4)
        self.assertEqual(b"", t.recv(0))
        self.assertEqual(0, len(t.buffer))
        self.assertEqual(b"Hell", t.recv())
        self.assertEqual(b"", t.recv(0))
        self.assertEqual(b"o", t.recv())

    def testClean(self):
        t = streams.Bytes(b"Hello World", chunk_size=4)
        self.assertEqual(b"He", t.recvn(2))
        t.clean()
        self.assertEqual(b"o World", t.recvall())


class SendTestCase(unittest.TestCase):

    def testSend(self):
        t = streams.Bytes()
        self.assertEqual(b"hello", t.send("hello"))
        self.assertEqual(b"!", t.send(ord("!")))
        self.assertEqual(b"hello!", t.reader.getvalue())

    def testSendline(self):
        t = streams.Bytes()
        self.assertEqual(b"\n", t.newline)
        self.assertEqual(b"hello\n", t.sendline("hello"))
        self.assertEqual(b"hello\n", t.reader.getvalue())

    def testSendafter(self):
        t = streams.Bytes(b"hello world")
        self.assertEqual(b"hello", t.sendafter("hello ", "hello"))
        self.assertEqual(b"world", t.recvall())

        t = streams.Bytes(b"hello world")
        with self.assertRaises(errors.IncompleteRead):
            t.sendafter("!", b"")
        self.assertEqual(b"", t.reader.getvalue())

    def testSendlineafter(self):
        t = streams.Bytes(b"hello world")
        self.assertEqual(b"hello\n", t.sendlineafter("hello ", "hello"))
        self.assertEqual(b"hello\n", t.reader.getvalue())

    def testSendthen(self):
        t = streams.Bytes(b"hello world")
        self.assertEqual(b"hello ", t.sendthen("hello ", "hello"))
        self.assertEqual(b"hello", t.reader.getvalue())

        with self.assertRaises(errors.IncompleteRead):
            t.sendthen("!", b"x")
        self.assertEqual(b"hellox", t.reader.getvalue())

    def testSendlinethen(self):
        t = streams.Bytes(b"hello world")
        self.assertEqual(b"hello ", t.sendlinethen("hello ", "hello"))
        self.assertEqual(b"hello\n", t.reader.getvalue())

    def testShortWrite(self):
        t = Tube(io.BytesIO(b""), ShortWriter())
        with self.assertRaises(errors.ShortWrite) as ctx:
            t.send(b"hello")
        self.assertEqual(1, ctx.exception.written)
        self.assertEqual(5, ctx.exception.expected)

    def testReadOnly(self):
        t = Tube(io.BytesIO(b""))
        with self.assertRaises(io.UnsupportedOperation):
            t.send(b"hello")

        t = streams.IO(io.BytesIO(b""))
        with self.assertRaises(io.UnsupportedOperation):
            t.send(b"hello")

    def testBadInput(self):
        t = streams.Bytes(b"hello")
        with self.assertRaises(TypeError):
            t.send(None)
        with self.assertRaises(TypeError):
            t.recvuntil(1.5)


class TubeTestCase(unittest.TestCase):

    def testNewline(self):
        with self.assertRaises(ValueError):
            Tube(io.BytesIO(b""), newline=b"\r\n")
        with self.assertRaises(ValueError):
            Tube(io.BytesIO(b""), newline=b"")

        t = Tube(io.BytesIO(b""), newline="\r")
        self.assertEqual(b"\r", t.newline)
        t.newline = 0
        self.assertEqual(b"\0", t.newline)

    def testClose(self):
        closed = []
        t = Tube(io.BytesIO(b""), close_fn=lambda: closed.append(True) or 7)
        self.assertEqual(7, t.close())
        self.assertEqual([True], closed)

        self.assertIsNone(Tube(io.BytesIO(b"")).close())

    def testContextManager(self):
        closed = []
        with Tube(io.BytesIO(b"hi\n"), close_fn=lambda: closed.append(1)) as t:
            self.assertEqual(b"hi", t.recvline(keepends=False))
        self.assertEqual([1], closed)

    def testIO(self):
        out = io.BytesIO()
        t = streams.IO(io.BufferedReader(io.BytesIO(LINES)), out)
        self.assertEqual(b"Foo", t.recvline(keepends=False))
        self.assertEqual(b"hey\n", t.sendline(b"hey"))
        self.assertEqual(b"hey\n", out.getvalue())
