from __future__ import annotations
import ctypes, platform
import ctypes.wintypes as wt

from .table import ERROR_INSUFFICIENT_BUFFER, NeedBuffer, TableData, TableError, TableResult

AF_INET = 2
TCP_TABLE_OWNER_PID_ALL = 5

_GetExtendedTcpTable = None

def _api():
    global _GetExtendedTcpTable
    if _GetExtendedTcpTable is None:
        iphlpapi = ctypes.WinDLL('Iphlpapi.dll')
        fn = iphlpapi.GetExtendedTcpTable
        fn.argtypes = [ctypes.c_void_p, ctypes.POINTER(wt.DWORD), wt.BOOL, wt.ULONG, ctypes.c_int, wt.ULONG]
        fn.restype = wt.DWORD
        _GetExtendedTcpTable = fn
    return _GetExtendedTcpTable

def provider(bufsize: int) -> TableResult:
    """One GetExtendedTcpTable call for the IPv4 owner-pid table."""
    if platform.system() != "Windows":
        raise OSError("GetExtendedTcpTable is only available on Windows")
    size = wt.DWORD(bufsize)
    buf = ctypes.create_string_buffer(bufsize) if bufsize else None
    ret = _api()(buf, ctypes.byref(size), False, AF_INET, TCP_TABLE_OWNER_PID_ALL, 0)
    if ret == ERROR_INSUFFICIENT_BUFFER:
        return NeedBuffer(size.value)
    if ret != 0:
        return TableError(ret)
    return TableData(buf.raw[:size.value] if buf is not None else b"")
