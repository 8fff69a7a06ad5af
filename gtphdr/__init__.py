# -*- coding: utf-8 -*-
"""Decoder for GTP-U / GTP' headers, extension headers and information
elements.

Example::

    import gtphdr

    hdr = gtphdr.decode(udp.data)
    print(hdr.teid, hdr.sequence_number, hdr.extensions)

Decoding is a pure function of the input buffer.  Malformed input raises a
:class:`gtphdr.errors.GtpError` (itself a ``dpkt.UnpackError``); no partial
result is ever returned.
"""
import logging
import traceback

from dpkt import dpkt as dpkt_base

from . import extension, info
from .cursor import ByteCursor
from .errors import (
    BadIpAddress, BadUdpPort, GtpError, PrematureEnd,
    UnsupportedExtensionHeader, UnsupportedInformationElement,
    UnsupportedVersion,
)
from .header import (
    GTPU_PORT, PROTO_GTP, PROTO_GTP_PRIME, SUPPORTED_VERSIONS,
    FlagSet, GtpHeader,
)

__version__ = '0.1.0'

log = logging.getLogger(__name__)


def _failed(what, buf, err):
    # The decoder frames in the traceback hold views of *buf*; drop their
    # locals so a bytearray buffer can be resized while *err* is kept.
    traceback.clear_frames(err.__traceback__)
    if log.isEnabledFor(logging.DEBUG):
        log.debug('%s decode failed: %s\n%s', what, err,
                  dpkt_base.hexdump(bytes(buf)))


def decode(buf, strict_version=False):
    """Decode the GTP header at the start of *buf*."""
    with ByteCursor(buf) as cursor:
        try:
            return GtpHeader.parse(cursor, strict_version=strict_version)
        except GtpError as e:
            _failed('GTP header', buf, e)
            raise


def decode_ies(buf):
    """Decode every information element in *buf*."""
    with ByteCursor(buf) as cursor:
        try:
            return info.parse_all(cursor)
        except GtpError as e:
            _failed('GTP information element', buf, e)
            raise


def decode_message(buf, strict_version=False):
    """Decode the header of *buf* and the information elements after it.

    Returns ``(header, ies)``.  Only meaningful for messages that carry IEs
    (Echo Response, Error Indication, ...), not for G-PDUs.
    """
    with ByteCursor(buf) as cursor:
        try:
            hdr = GtpHeader.parse(cursor, strict_version=strict_version)
            return hdr, info.parse_all(cursor)
        except GtpError as e:
            _failed('GTP message', buf, e)
            raise
