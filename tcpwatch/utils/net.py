from __future__ import annotations
import socket, struct

def port_from_wire(v: int) -> int:
    # only the low 16 bits carry the port, in network order
    return ((v >> 8) & 0xFF) | ((v & 0xFF) << 8)

def port_to_wire(port: int) -> int:
    return port_from_wire(port & 0xFFFF)

def ipv4_from_dword(dw: int) -> str:
    return socket.inet_ntoa(struct.pack('<I', dw & 0xFFFFFFFF))

def ipv4_to_dword(ip: str) -> int:
    return struct.unpack('<I', socket.inet_aton(ip))[0]
