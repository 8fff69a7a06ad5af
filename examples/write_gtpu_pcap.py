#!/usr/bin/env python
"""
Wrap a handful of GTP-U headers in Ethernet / IPv4 / UDP and write the
resulting frames to a pcap file.

The frames follow a short S1-U exchange between an eNB and an SGW:

  G-PDUs without optional fields, with a sequence number, with an N-PDU
  number, with UDP port and PDCP PDU number extension headers, and an
  Echo Response-style message carrying Recovery and GTP-U peer address IEs.

Output: examples/data/gtpu_example.pcap
"""
import os
import socket
import struct
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import dpkt
from dpkt.ethernet import Ethernet, ETH_TYPE_IP
from dpkt.ip import IP, IP_PROTO_UDP
from dpkt.udp import UDP

from gtphdr import GTPU_PORT
from gtphdr.extension import EXT_END, EXT_PDCP_PDU, EXT_UDP_PORT
from gtphdr.info import IE_GSN_ADDRESS, IE_RECOVERY

# ── constants ────────────────────────────────────────────────────────────────

# Node tuples: (label, MAC, IPv4)
ENB = ('eNB', '02:00:00:00:00:01', '192.168.100.1')
SGW = ('SGW', '02:00:00:00:00:02', '10.20.20.2')

ENB_UP_TEID = 0x0000_4444
SGW_UP_TEID = 0x0000_3333

# First-octet bits
_V1_GTP = 0x30
_E, _S, _PN = 0x04, 0x02, 0x01

# ── GTP-U byte builders ──────────────────────────────────────────────────────


def gtpu(teid, payload=b'', seqnum=None, npdu=None, extensions=()):
    """Build the bytes of one GTP-U header followed by *payload*.

    *extensions* is a sequence of ``(type, content)`` pairs; each content is
    padded to a whole number of 4-octet words.
    """
    flags = _V1_GTP
    opt = b''
    if seqnum is not None:
        flags |= _S
        opt += struct.pack('!H', seqnum)
    if npdu is not None:
        flags |= _PN
        opt += struct.pack('!B', npdu)
    if extensions:
        flags |= _E
        opt += bytes([extensions[0][0]])
        for i, (_, content) in enumerate(extensions):
            content += b'\x00' * (-len(content) % 4)
            nxt = extensions[i + 1][0] if i + 1 < len(extensions) else EXT_END
            opt += bytes([len(content) // 4]) + content + bytes([nxt])
    return struct.pack('!BHI', flags, len(payload), teid) + opt + payload


def recovery_ie(counter):
    return bytes([IE_RECOVERY, counter & 0xff])


def peer_address_ie(ip):
    packed = socket.inet_aton(ip)
    return bytes([IE_GSN_ADDRESS, len(packed)]) + packed


# ── frame builder ─────────────────────────────────────────────────────────────

_ip_id = 1  # incremented per frame so Wireshark can distinguish them


def make_frame(src, dst, payload):
    """Wrap GTP-U bytes in UDP / IPv4 / Ethernet bytes."""
    global _ip_id
    udp = UDP(sport=GTPU_PORT, dport=GTPU_PORT, data=payload)
    udp.ulen = 8 + len(payload)
    ip = IP(
        src=socket.inet_aton(src[2]),
        dst=socket.inet_aton(dst[2]),
        p=IP_PROTO_UDP,
        data=udp,
        ttl=64,
        id=_ip_id,
    )
    ip.len = 20 + udp.ulen
    _ip_id += 1
    eth = Ethernet(
        src=bytes.fromhex(src[1].replace(':', '')),
        dst=bytes.fromhex(dst[1].replace(':', '')),
        type=ETH_TYPE_IP,
        data=ip,
    )
    return bytes(eth)


# ── traffic ───────────────────────────────────────────────────────────────────

def s1u_flow():
    """User-plane traffic on the S1-U eNB-SGW interface."""
    inner = b'\x45' + b'\x00' * 19      # placeholder inner IPv4 header
    return [
        (0.000, ENB, SGW, 'G-PDU',
         gtpu(SGW_UP_TEID, inner)),
        (0.010, SGW, ENB, 'G-PDU with sequence number',
         gtpu(ENB_UP_TEID, inner, seqnum=1)),
        (0.020, ENB, SGW, 'G-PDU with N-PDU number',
         gtpu(SGW_UP_TEID, inner, seqnum=2, npdu=9)),
        (0.030, ENB, SGW, 'G-PDU with PDCP PDU number',
         gtpu(SGW_UP_TEID, inner, seqnum=3,
              extensions=[(EXT_PDCP_PDU, struct.pack('!I', 1234))])),
        (0.040, SGW, ENB, 'Error Indication style UDP port header',
         gtpu(ENB_UP_TEID, seqnum=4,
              extensions=[(EXT_UDP_PORT, struct.pack('!I', GTPU_PORT))])),
        (1.000, SGW, ENB, 'Echo Response',
         gtpu(0, recovery_ie(0) + peer_address_ie(SGW[2]), seqnum=5)),
    ]


# ── main ──────────────────────────────────────────────────────────────────────

def main():
    out_path = os.path.join(os.path.dirname(__file__), 'data', 'gtpu_example.pcap')
    os.makedirs(os.path.dirname(out_path), exist_ok=True)

    packets = s1u_flow()

    with open(out_path, 'wb') as f:
        writer = dpkt.pcap.Writer(f)
        for ts, src, dst, desc, raw_gtp in packets:
            frame = make_frame(src, dst, raw_gtp)
            writer.writepkt(frame, ts=ts)
            print(f't={ts:6.3f}  {src[0]:4s} -> {dst[0]:4s}  {desc}  ({len(frame)}B frame / {len(raw_gtp)}B GTP)')

    print(f'\nWrote {len(packets)} packets to {out_path}')


if __name__ == '__main__':
    main()
