# -*- coding: utf-8 -*-
"""Unit tests for gtphdr.header."""
import itertools
import struct

import pytest

from gtphdr.cursor import ByteCursor
from gtphdr.errors import PrematureEnd, UnsupportedExtensionHeader, UnsupportedVersion
from gtphdr.extension import (
    EXT_END, EXT_MBMS_SUPPORT, EXT_PDCP_PDU, EXT_UDP_PORT,
    COMPREHENSION_ALL, COMPREHENSION_DISCARD,
    ExtensionHeader, PdcpPduNumber, UdpPort,
)
from gtphdr.header import (
    PROTO_GTP, PROTO_GTP_PRIME, FlagSet, GtpHeader,
)

# ── shared test constants ─────────────────────────────────────────────────────

V1_GTP = 0x30           # version 1, PT=1, no flags
E_BIT, S_BIT, PN_BIT = 0x04, 0x02, 0x01
TEID = 0x00001234

# UDP port 2152 record followed by a PDCP PDU number 7 record, then the end.
CHAIN = bytes([
    0x01, 0x00, 0x00, 0x08, 0x68, EXT_PDCP_PDU,
    0x01, 0x00, 0x00, 0x00, 0x07, EXT_END,
])

# ── helpers ───────────────────────────────────────────────────────────────────


def _fixed(octet, length=0, teid=TEID):
    return struct.pack('!BHI', octet, length, teid)


def _parse(buf, **kwargs):
    return GtpHeader.parse(ByteCursor(buf), **kwargs)


# ── FlagSet ───────────────────────────────────────────────────────────────────

def test_flagset_none():
    flags = FlagSet.parse(V1_GTP)
    assert flags == FlagSet(False, False, False)
    assert not flags.any()


def test_flagset_bits():
    assert FlagSet.parse(S_BIT).sequence_number
    assert FlagSet.parse(PN_BIT).npdu_number
    assert FlagSet.parse(E_BIT).extension_header


def test_flagset_bits_are_independent():
    flags = FlagSet.parse(E_BIT | PN_BIT)
    assert flags.extension_header
    assert flags.npdu_number
    assert not flags.sequence_number
    assert flags.any()


def test_flagset_ignores_spare_and_version_bits():
    assert FlagSet.parse(0xf8) == FlagSet(False, False, False)


# ── version and protocol ──────────────────────────────────────────────────────

def test_version_and_protocol_do_not_overlap():
    # version 1 alone sets bit 0x20, which must not read as PT
    hdr = _parse(_fixed(0x20))
    assert hdr.version == 1
    assert hdr.protocol == PROTO_GTP_PRIME
    hdr = _parse(_fixed(0x10))
    assert hdr.version == 0
    assert hdr.protocol == PROTO_GTP


@pytest.mark.parametrize('version', range(8))
def test_every_version_value(version):
    hdr = _parse(_fixed(version << 5 | 0x10))
    assert hdr.version == version
    assert hdr.protocol == PROTO_GTP


def test_protocol_name():
    assert _parse(_fixed(V1_GTP)).protocol_name == 'GTP'
    assert _parse(_fixed(0x00)).protocol_name == "GTP'"


def test_version_not_enforced_by_default():
    assert _parse(_fixed(0x50)).version == 2


def test_strict_version_rejects_v2():
    with pytest.raises(UnsupportedVersion) as exc:
        _parse(_fixed(0x50), strict_version=True)
    assert exc.value.version == 2


def test_strict_version_checked_before_length():
    with pytest.raises(UnsupportedVersion):
        _parse(b'\x50', strict_version=True)


@pytest.mark.parametrize('octet', [0x00, 0x10, V1_GTP])
def test_strict_version_accepts_gtp_prime_and_v1(octet):
    assert _parse(_fixed(octet), strict_version=True).teid == TEID


# ── mandatory fields ──────────────────────────────────────────────────────────

def test_minimal_header():
    hdr = _parse(bytes([0b00110000, 0, 0, 0, 0, 0, 1]))
    assert hdr.version == 1
    assert hdr.protocol == PROTO_GTP
    assert hdr.flags == FlagSet(False, False, False)
    assert hdr.length == 0
    assert hdr.teid == 1
    assert hdr.sequence_number is None
    assert hdr.npdu_number is None
    assert hdr.extensions == ()


def test_length_and_teid_big_endian():
    hdr = _parse(_fixed(V1_GTP, length=0x0102, teid=0xdeadbeef))
    assert hdr.length == 0x0102
    assert hdr.teid == 0xdeadbeef


def test_cursor_left_after_header():
    c = ByteCursor(_fixed(V1_GTP) + b'payload')
    GtpHeader.parse(c)
    assert c.position == 7
    assert bytes(c.read(c.remaining)) == b'payload'


# ── optional fields ───────────────────────────────────────────────────────────

def test_sequence_and_npdu():
    hdr = _parse(bytes([0b00110011, 0, 0, 0, 0, 0, 1, 0, 14, 5, 0]))
    assert hdr.version == 1
    assert hdr.sequence_number == 14
    assert hdr.npdu_number == 5
    assert hdr.extensions == ()


def test_sequence_only():
    hdr = _parse(_fixed(V1_GTP | S_BIT) + b'\x12\x34')
    assert hdr.sequence_number == 0x1234
    assert hdr.npdu_number is None


def test_npdu_only():
    hdr = _parse(_fixed(V1_GTP | PN_BIT) + b'\x09')
    assert hdr.sequence_number is None
    assert hdr.npdu_number == 9


@pytest.mark.parametrize('s,pn,e', list(itertools.product((0, 1), repeat=3)))
def test_flag_fidelity(s, pn, e):
    octet = V1_GTP | (S_BIT if s else 0) | (PN_BIT if pn else 0) | (E_BIT if e else 0)
    buf = _fixed(octet)
    if s:
        buf += b'\x00\x01'
    if pn:
        buf += b'\x02'
    if e:
        buf += bytes([EXT_MBMS_SUPPORT, 0, EXT_END])
    hdr = _parse(buf)
    assert (hdr.sequence_number is not None) == bool(s)
    assert (hdr.npdu_number is not None) == bool(pn)
    assert bool(hdr.extensions) == bool(e)
    assert hdr.flags == FlagSet(bool(s), bool(pn), bool(e))


# ── extension chain ───────────────────────────────────────────────────────────

def test_extension_chain():
    hdr = _parse(_fixed(V1_GTP | E_BIT) + bytes([EXT_UDP_PORT]) + CHAIN)
    assert hdr.extensions == (
        ExtensionHeader(EXT_UDP_PORT, COMPREHENSION_DISCARD, UdpPort(2152)),
        ExtensionHeader(EXT_PDCP_PDU, COMPREHENSION_ALL, PdcpPduNumber(7)),
    )


def test_extension_flag_with_end_type_is_empty():
    hdr = _parse(_fixed(V1_GTP | E_BIT) + bytes([EXT_END]))
    assert hdr.flags.extension_header
    assert hdr.extensions == ()


def test_extension_flag_with_one_byte_left():
    with pytest.raises(PrematureEnd):
        _parse(_fixed(V1_GTP | E_BIT) + bytes([EXT_UDP_PORT]))


def test_extension_flag_with_nothing_left():
    with pytest.raises(PrematureEnd):
        _parse(_fixed(V1_GTP | E_BIT))


def test_unknown_extension_type_fails_whole_header():
    with pytest.raises(UnsupportedExtensionHeader) as exc:
        _parse(_fixed(V1_GTP | E_BIT) + bytes([0x03, 0, 0]))
    assert exc.value.tag == 0x03


# ── truncation ────────────────────────────────────────────────────────────────

FULL = (_fixed(V1_GTP | E_BIT | S_BIT | PN_BIT) + b'\x00\x2a' + b'\x05' +
        bytes([EXT_UDP_PORT]) + CHAIN)


def test_full_header():
    hdr = _parse(FULL)
    assert hdr.sequence_number == 42
    assert hdr.npdu_number == 5
    assert len(hdr.extensions) == 2


@pytest.mark.parametrize('cut', range(len(FULL)))
def test_truncation_at_every_offset(cut):
    with pytest.raises(PrematureEnd):
        _parse(FULL[:cut])


# ── determinism ───────────────────────────────────────────────────────────────

def test_same_buffer_same_result():
    assert _parse(FULL) == _parse(FULL)
    assert hash(_parse(FULL)) == hash(_parse(FULL))
