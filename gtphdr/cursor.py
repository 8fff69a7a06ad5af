# -*- coding: utf-8 -*-
"""Bounds-checked sequential reader over one packet buffer.

The cursor never copies: :meth:`ByteCursor.read` hands out read-only
``memoryview`` slices of the caller's buffer.  Such a slice is only valid
while that buffer is alive and unchanged, so decoded values copy whatever
bytes they keep (``bytes(view)``) instead of holding on to the view.
"""
import struct

from .errors import PrematureEnd

# Every multi-byte GTP field is in network byte order (3GPP TS 29.281 §5.1).
_U16 = struct.Struct('!H')
_U32 = struct.Struct('!I')


class ByteCursor:
    """Forward-only reader over an immutable byte buffer.

    ``0 <= position <= len(cursor)`` holds at all times.  A read either
    advances the position by exactly the requested count or raises
    :class:`PrematureEnd` and leaves the position where it was.
    """

    __slots__ = ('_buf', '_pos')

    def __init__(self, buf):
        if isinstance(buf, ByteCursor):
            raise TypeError('wrap the buffer, not another cursor')
        self._buf = memoryview(buf).cast('B').toreadonly()
        self._pos = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()

    def release(self):
        """Stop viewing the buffer; the cursor cannot be read afterwards.

        Views handed out by :meth:`read` and :meth:`window` must be gone by
        then for the caller's buffer to become resizable again.
        """
        self._buf.release()

    def __len__(self):
        return len(self._buf)

    def __repr__(self):
        return f'{self.__class__.__name__}(position={self._pos}, length={len(self._buf)})'

    @property
    def position(self):
        return self._pos

    @property
    def remaining(self):
        return len(self._buf) - self._pos

    def at_end(self):
        return self._pos == len(self._buf)

    def _check(self, n):
        if n < 0:
            raise ValueError(f'cannot read a negative number of bytes ({n})')
        if n > len(self._buf) - self._pos:
            raise PrematureEnd(n, len(self._buf) - self._pos)

    def read(self, n):
        """Return the next *n* bytes as a read-only view and advance past them."""
        self._check(n)
        start = self._pos
        self._pos += n
        return self._buf[start:self._pos]

    def read_u8(self):
        self._check(1)
        value = self._buf[self._pos]
        self._pos += 1
        return value

    def read_u16(self):
        self._check(2)
        value, = _U16.unpack_from(self._buf, self._pos)
        self._pos += 2
        return value

    def read_u32(self):
        self._check(4)
        value, = _U32.unpack_from(self._buf, self._pos)
        self._pos += 4
        return value

    def window(self, n):
        """Return a cursor over the next *n* bytes only, and skip them here.

        Used for length-delimited bodies: the sub-cursor cannot read past the
        body, and the parent resumes right after it.
        """
        return ByteCursor(self.read(n))
