from .diff import diff_connections
from .projector import build_connection_set, conn_key, project_row

__all__ = ["diff_connections", "build_connection_set", "conn_key", "project_row"]
