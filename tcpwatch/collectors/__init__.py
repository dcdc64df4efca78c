from .table import (
    NeedBuffer,
    TableData,
    TableError,
    TableProvider,
    TableResult,
    decode_table,
    fetch_table,
    iter_rows,
    state_name,
)

__all__ = [
    "NeedBuffer",
    "TableData",
    "TableError",
    "TableProvider",
    "TableResult",
    "decode_table",
    "fetch_table",
    "iter_rows",
    "state_name",
]
