from __future__ import annotations
from typing import List

from ..models import ConnectionSet, ConnEvent, EventKind

def diff_connections(current: ConnectionSet, previous: ConnectionSet) -> List[ConnEvent]:
    """Classify keys as NEW, CHANGED or CLOSED between two samples.

    CHANGED carries the current snapshot and the old state name; CLOSED
    carries the last snapshot seen, since the socket is gone. The order of
    the returned events has no meaning.
    """
    events: List[ConnEvent] = []
    for key, conn in current.items():
        prev = previous.get(key)
        if prev is None:
            events.append(ConnEvent(EventKind.NEW, key, conn))
        elif prev.state != conn.state:
            events.append(ConnEvent(EventKind.CHANGED, key, conn, prev_state=prev.state))
    for key, prev in previous.items():
        if key not in current:
            events.append(ConnEvent(EventKind.CLOSED, key, prev))
    return events
