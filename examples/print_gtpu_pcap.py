#!/usr/bin/env python
"""
Read a pcap file, decode the GTP-U header of every UDP datagram on port 2152
and print it.  Datagrams that fail to decode are reported and skipped.

Usage: print_gtpu_pcap.py [file.pcap]   (default: examples/data/gtpu_example.pcap)
"""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import dpkt
from dpkt import hexdump
from dpkt.ethernet import Ethernet
from dpkt.udp import UDP

import gtphdr
from gtphdr import info
from gtphdr.cursor import ByteCursor
from gtphdr.extension import COMPREHENSION_NAMES
from gtphdr.header import GtpHeader

# ── helpers ───────────────────────────────────────────────────────────────────


def show(ts, hdr, ies):
    print(f'─── t={ts:.3f}  {hdr.protocol_name} v{hdr.version}  '
          f'TEID 0x{hdr.teid:08x}  length {hdr.length} ───')
    if hdr.sequence_number is not None:
        print(f'  sequence number : {hdr.sequence_number}')
    if hdr.npdu_number is not None:
        print(f'  N-PDU number    : {hdr.npdu_number}')
    for ext in hdr.extensions:
        print(f'  extension       : {ext.name} '
              f'({COMPREHENSION_NAMES[ext.comprehension]}) {ext.content}')
    for ie in ies:
        print(f'  IE              : {ie}')
    print()


def gtpu_payloads(f):
    for ts, buf in dpkt.pcap.Reader(f):
        eth = Ethernet(buf)
        udp = getattr(eth.data, 'data', None)
        if isinstance(udp, UDP) and gtphdr.GTPU_PORT in (udp.sport, udp.dport):
            yield ts, udp.data


# ── main ──────────────────────────────────────────────────────────────────────

def main():
    path = (sys.argv[1] if len(sys.argv) > 1 else
            os.path.join(os.path.dirname(__file__), 'data', 'gtpu_example.pcap'))

    with open(path, 'rb') as f:
        for ts, payload in gtpu_payloads(f):
            try:
                with ByteCursor(payload) as cursor:
                    hdr = GtpHeader.parse(cursor)
                    # Only IE-carrying messages have IEs after the header;
                    # the example file marks them with a zero TEID.
                    ies = info.parse_all(cursor) if hdr.teid == 0 else ()
            except gtphdr.GtpError as e:
                print(f'─── t={ts:.3f}  undecodable: {e} ───')
                print(hexdump(bytes(payload)))
                print()
                continue
            show(ts, hdr, ies)


if __name__ == '__main__':
    main()
