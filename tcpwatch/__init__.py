"""Watch which processes own which IPv4 TCP connections, and how they change."""

__version__ = "0.2.0"
