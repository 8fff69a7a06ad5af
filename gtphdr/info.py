# -*- coding: utf-8 -*-
"""GTP-U information elements (3GPP TS 29.281 §8).

IE types below 128 are TV elements whose length follows from the type.
Types 128 and above are TLV elements carrying a one-byte length prefix; their
body is decoded inside a window of exactly that many bytes, except for the
peer address whose length alone selects IPv4 or IPv6.
"""
import ipaddress
from collections import namedtuple

from . import extension
from .errors import (
    BadIpAddress, UnsupportedExtensionHeader, UnsupportedInformationElement,
)

# ---------------------------------------------------------------------------
# IE types
# ---------------------------------------------------------------------------
IE_RECOVERY          = 14    # TV, 1 byte
IE_TEID_DATA         = 16    # TV, 4 bytes
IE_GSN_ADDRESS       = 133   # TLV, GTP-U peer address
IE_EXT_HEADER        = 141   # TLV, extension header
IE_PRIVATE_EXTENSION = 255   # TLV, vendor specific

_TLV_BIT = 0x80

# ---------------------------------------------------------------------------
# Decoded values
# ---------------------------------------------------------------------------

# Restart counter; receivers ignore its value but it is still decoded.
Recovery = namedtuple('Recovery', 'restart_counter')

TeidData = namedtuple('TeidData', 'teid')


class PeerAddress(namedtuple('PeerAddress', 'version value')):
    """GTP-U peer address.

    ``value`` is the address as an integer for IPv4 and the 16 raw address
    bytes for IPv6.
    """
    __slots__ = ()

    @property
    def address(self):
        if self.version == 4:
            return ipaddress.IPv4Address(self.value)
        return ipaddress.IPv6Address(self.value)


# ``header`` is a UdpPort or PdcpPduNumber from gtphdr.extension.
ExtensionHeaderIE = namedtuple('ExtensionHeaderIE', 'type comprehension header')

PrivateExtension = namedtuple('PrivateExtension', 'extension_id value')


# ---------------------------------------------------------------------------
# TV decoders
# ---------------------------------------------------------------------------

def _parse_recovery(cursor):
    return Recovery(cursor.read_u8())


def _parse_teid_data(cursor):
    return TeidData(cursor.read_u32())


_TV_DECODERS = {
    IE_RECOVERY:  _parse_recovery,
    IE_TEID_DATA: _parse_teid_data,
}

# ---------------------------------------------------------------------------
# TLV decoders, called with the IE length and the cursor positioned on the body
# ---------------------------------------------------------------------------

def _parse_peer_address(length, cursor):
    if length == 4:
        return PeerAddress(4, cursor.read_u32())
    if length == 16:
        return PeerAddress(6, bytes(cursor.read(16)))
    raise BadIpAddress(length)


_IE_EXT_TYPES = frozenset((extension.EXT_UDP_PORT, extension.EXT_PDCP_PDU))


def _parse_ext_header(length, cursor):
    body = cursor.window(length)
    ext_type = body.read_u8()
    if ext_type not in _IE_EXT_TYPES:
        raise UnsupportedExtensionHeader(ext_type)
    ext_len = body.read_u8()
    content = body.read(ext_len * 4)
    return ExtensionHeaderIE(ext_type, extension.comprehension(ext_type),
                             extension.decode_content(ext_type, content))


def _parse_private_extension(length, cursor):
    body = cursor.window(length)
    extension_id = body.read_u16()
    return PrivateExtension(extension_id, bytes(body.read(body.remaining)))


_TLV_DECODERS = {
    IE_GSN_ADDRESS:       _parse_peer_address,
    IE_EXT_HEADER:        _parse_ext_header,
    IE_PRIVATE_EXTENSION: _parse_private_extension,
}


def parse(cursor):
    """Decode one information element from *cursor*."""
    ie_type = cursor.read_u8()
    if not ie_type & _TLV_BIT:
        decoder = _TV_DECODERS.get(ie_type)
        if decoder is None:
            raise UnsupportedInformationElement(ie_type)
        return decoder(cursor)

    length = cursor.read_u8()
    decoder = _TLV_DECODERS.get(ie_type)
    if decoder is None:
        raise UnsupportedInformationElement(ie_type)
    return decoder(length, cursor)


def parse_all(cursor):
    """Decode information elements until *cursor* is exhausted."""
    ies = []
    while not cursor.at_end():
        ies.append(parse(cursor))
    return tuple(ies)
