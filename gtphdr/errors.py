# -*- coding: utf-8 -*-
"""Decode errors raised by :mod:`gtphdr`.

Every error derives from :class:`dpkt.dpkt.UnpackError`, so code that already
guards dpkt unpacking with ``except dpkt.UnpackError`` drops malformed GTP
packets the same way.  :class:`PrematureEnd` is additionally a
:class:`dpkt.dpkt.NeedData`.

The offending values are the exception ``args`` and the message is built in
``__str__``, so errors survive pickling and copying unchanged.
"""
from dpkt import dpkt as dpkt_base


class GtpError(dpkt_base.UnpackError):
    """Base class for all GTP decode errors."""


class PrematureEnd(GtpError, dpkt_base.NeedData):
    """Fewer bytes remain than a field requires."""

    def __init__(self, needed=None, remaining=None):
        super().__init__(needed, remaining)
        self.needed = needed
        self.remaining = remaining

    def __str__(self):
        if self.needed is None:
            return 'premature end of buffer'
        return f'premature end of buffer: need {self.needed}, {self.remaining} left'


class UnsupportedVersion(GtpError):
    def __init__(self, version):
        super().__init__(version)
        self.version = version

    def __str__(self):
        return f'unsupported GTP version {self.version}'


class UnsupportedInformationElement(GtpError):
    def __init__(self, tag):
        super().__init__(tag)
        self.tag = tag

    def __str__(self):
        return f'unsupported information element type {self.tag}'


class UnsupportedExtensionHeader(GtpError):
    def __init__(self, tag):
        super().__init__(tag)
        self.tag = tag

    def __str__(self):
        return f'unsupported extension header type 0x{self.tag:02x}'


class BadIpAddress(GtpError):
    """Peer address length is neither 4 (IPv4) nor 16 (IPv6)."""

    def __init__(self, length=None):
        super().__init__(length)
        self.length = length

    def __str__(self):
        return f'bad GTP peer address length {self.length}'


class BadUdpPort(GtpError):
    """Decoded UDP port does not fit in 16 bits."""

    def __init__(self, port):
        super().__init__(port)
        self.port = port

    def __str__(self):
        return f'bad UDP port {self.port}'
