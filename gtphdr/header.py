# -*- coding: utf-8 -*-
"""GTP-U / GTP' header decoding (3GPP TS 29.281 §5.1, TS 32.295 §6.1).

First octet layout::

     7   6   5   4    3    2   1   0
    +-----------+----+----+---+---+----+
    |  version  | PT | -- | E | S | PN |
    +-----------+----+----+---+---+----+

followed by the 16-bit payload length and the 32-bit TEID, then the optional
sequence number (S), N-PDU number (PN) and extension header chain (E).
"""
from collections import namedtuple

from . import extension
from .errors import UnsupportedVersion

# Versions accepted by ``GtpHeader.parse(..., strict_version=True)``.
# 0 is GTP', 1 is GTPv1; GTPv2-C is not decoded here.
SUPPORTED_VERSIONS = (0, 1)

GTPU_PORT = 2152

# Protocol discriminator values
PROTO_GTP_PRIME = 0
PROTO_GTP       = 1

PROTOCOL_NAMES = {
    PROTO_GTP_PRIME: "GTP'",
    PROTO_GTP:       'GTP',
}

_VERSION_SHIFT = 5
_PT_MASK       = 0x10
_E_MASK        = 0x04
_S_MASK        = 0x02
_PN_MASK       = 0x01


class FlagSet(namedtuple('FlagSet', 'sequence_number npdu_number extension_header')):
    """The S, PN and E bits of the first header octet.

    The bits are independent: any combination may be set.
    """
    __slots__ = ()

    @classmethod
    def parse(cls, octet):
        return cls(sequence_number=bool(octet & _S_MASK),
                   npdu_number=bool(octet & _PN_MASK),
                   extension_header=bool(octet & _E_MASK))

    def any(self):
        return self.sequence_number or self.npdu_number or self.extension_header


_HEADER_FIELDS = ('version protocol flags length teid '
                  'sequence_number npdu_number extensions')


class GtpHeader(namedtuple('GtpHeader', _HEADER_FIELDS)):
    """A fully decoded GTP header.

    ``sequence_number`` and ``npdu_number`` are ``None`` when their flag is
    clear.  ``extensions`` is a tuple of
    :class:`~gtphdr.extension.ExtensionHeader`, empty unless the E flag is set.
    """
    __slots__ = ()

    @classmethod
    def parse(cls, cursor, strict_version=False):
        """Decode one header from *cursor*, leaving it just past the header.

        Raises a :class:`~gtphdr.errors.GtpError` on the first problem; the
        cursor position is then unspecified.
        """
        octet = cursor.read_u8()
        version = octet >> _VERSION_SHIFT
        if strict_version and version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersion(version)
        protocol = PROTO_GTP if octet & _PT_MASK else PROTO_GTP_PRIME
        flags = FlagSet.parse(octet)

        length = cursor.read_u16()
        teid = cursor.read_u32()

        sequence_number = npdu_number = None
        if flags.sequence_number:
            sequence_number = cursor.read_u16()
        if flags.npdu_number:
            npdu_number = cursor.read_u8()

        extensions = ()
        if flags.extension_header:
            extensions = extension.walk(cursor, cursor.read_u8())

        return cls(version, protocol, flags, length, teid,
                   sequence_number, npdu_number, extensions)

    @property
    def protocol_name(self):
        return PROTOCOL_NAMES[self.protocol]
