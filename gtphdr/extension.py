# -*- coding: utf-8 -*-
"""GTP-U extension headers (3GPP TS 29.281 §5.2).

An extension header is a small TLV record: the *type* octet lives in the
preceding header (or the preceding extension record), then come a length byte
counted in 4-octet words, the content, and the type of the next record.  The
chain ends at a record whose next type is :data:`EXT_END`.

The top two bits of every type octet carry the *comprehension* policy a node
should apply when it does not understand the record.  The policy is recorded
on each decoded record, but this decoder rejects every unknown type.
"""
from collections import namedtuple

from .cursor import ByteCursor
from .errors import BadUdpPort, PrematureEnd, UnsupportedExtensionHeader

# ---------------------------------------------------------------------------
# Extension header types (3GPP TS 29.281 Figure 5.2.1-3)
# ---------------------------------------------------------------------------
EXT_END              = 0x00   # No more extension headers
EXT_MBMS_SUPPORT     = 0x01   # MBMS support indication
EXT_MS_INFO_CHANGE   = 0x02   # MS Info Change Reporting support indication
EXT_UDP_PORT         = 0x40   # UDP Port
EXT_PDCP_PDU         = 0xc0   # PDCP PDU Number
EXT_SUSPEND_REQ      = 0xc1   # Suspend Request
EXT_SUSPEND_RES      = 0xc2   # Suspend Response

EXTENSION_TYPES = {
    EXT_END:            'No more extension headers',
    EXT_MBMS_SUPPORT:   'MBMS support indication',
    EXT_MS_INFO_CHANGE: 'MS Info Change Reporting support indication',
    EXT_UDP_PORT:       'UDP Port',
    EXT_PDCP_PDU:       'PDCP PDU Number',
    EXT_SUSPEND_REQ:    'Suspend Request',
    EXT_SUSPEND_RES:    'Suspend Response',
}

_RECORD_TYPES = frozenset(EXTENSION_TYPES) - {EXT_END}

# ---------------------------------------------------------------------------
# Comprehension policies (3GPP TS 29.281 §5.2.1, top two bits of the type)
# ---------------------------------------------------------------------------
COMPREHENSION_OPTIONAL = 0   # not required; forward if not understood
COMPREHENSION_DISCARD  = 1   # not required; discard if not understood
COMPREHENSION_RECEIVER = 2   # required by the endpoint receiver
COMPREHENSION_ALL      = 3   # required by every node

COMPREHENSION_NAMES = {
    COMPREHENSION_OPTIONAL: 'optional',
    COMPREHENSION_DISCARD:  'discard',
    COMPREHENSION_RECEIVER: 'receiver',
    COMPREHENSION_ALL:      'all',
}


def comprehension(type_octet):
    """Return the comprehension policy encoded in an extension type octet."""
    return (type_octet >> 6) & 0x03


# ---------------------------------------------------------------------------
# Decoded values
# ---------------------------------------------------------------------------

UdpPort = namedtuple('UdpPort', 'port')
PdcpPduNumber = namedtuple('PdcpPduNumber', 'number')


class ExtensionHeader(namedtuple('ExtensionHeader', 'type comprehension content')):
    """One decoded extension header record.

    ``content`` is :class:`UdpPort` or :class:`PdcpPduNumber` for the types
    with a structured decoding, and the raw content ``bytes`` otherwise.
    """
    __slots__ = ()

    @property
    def name(self):
        return EXTENSION_TYPES[self.type]


def _decode_udp_port(content):
    # Only the leading 32-bit word is meaningful; it must fit a UDP port.
    port = ByteCursor(content).read_u32()
    if port > 0xffff:
        raise BadUdpPort(port)
    return UdpPort(port)


def _decode_pdcp_pdu(content):
    return PdcpPduNumber(ByteCursor(content).read_u32())


_CONTENT_DECODERS = {
    EXT_UDP_PORT: _decode_udp_port,
    EXT_PDCP_PDU: _decode_pdcp_pdu,
}


def decode_content(ext_type, content):
    """Decode the content bytes of an extension record of type *ext_type*."""
    decoder = _CONTENT_DECODERS.get(ext_type)
    if decoder is None:
        return bytes(content)
    return decoder(content)


def _read_record(cursor, ext_type):
    if ext_type not in _RECORD_TYPES:
        raise UnsupportedExtensionHeader(ext_type)
    length = cursor.read_u8()
    content = cursor.read(length * 4)
    next_type = cursor.read_u8()
    record = ExtensionHeader(ext_type, comprehension(ext_type),
                             decode_content(ext_type, content))
    return record, next_type


def walk(cursor, first_type):
    """Decode the extension header chain starting with type *first_type*.

    Returns the records as a tuple, in wire order.  Each record consumes at
    least its length byte and the next-type byte, so the loop is capped at
    half the remaining bytes; running out of bytes before :data:`EXT_END`
    raises :class:`PrematureEnd`.
    """
    records = []
    ext_type = first_type
    for _ in range(cursor.remaining // 2 + 1):
        if ext_type == EXT_END:
            return tuple(records)
        record, ext_type = _read_record(cursor, ext_type)
        records.append(record)
    raise PrematureEnd()
