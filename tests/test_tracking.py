"""Tests for projecting rows into connection sets and diffing them."""

from tcpwatch.collectors.table import decode_table
from tcpwatch.models import EventKind
from tcpwatch.targets import TargetSpec
from tcpwatch.tracking import build_connection_set, conn_key, diff_connections, project_row

from .conftest import make_conn, make_row, make_table


def _events(events):
    return {(e.kind, e.key, e.prev_state, e.conn.state) for e in events}


class TestProjector:
    """Tests for Connection Projector behaviour."""

    def test_project_row(self):
        key, conn = project_row(make_row(local="10.0.0.5", lport=8080, remote="10.0.0.9", rport=443, state=5), "java.exe")
        assert key == "10.0.0.5:8080 -> 10.0.0.9:443"
        assert conn.laddr == ("10.0.0.5", 8080)
        assert conn.raddr == ("10.0.0.9", 443)
        assert conn.state == "ESTABLISHED"
        assert conn.name == "java.exe"
        assert conn.pid == 100
        assert conn_key(conn) == key

    def test_unspecified_remote_dropped(self):
        assert project_row(make_row(remote="0.0.0.0", rport=0, state=2), "java.exe") is None

    def test_unknown_state(self):
        _, conn = project_row(make_row(state=99), "x")
        assert conn.state == "UNKNOWN"

    def test_non_matching_rows_skipped(self, resolver):
        rows = [make_row(pid=100, lport=1), make_row(pid=200, lport=2)]
        conns = build_connection_set(rows, TargetSpec(("java.exe",)), resolver)
        assert [c.pid for c in conns.values()] == [100]

    def test_listener_never_projected_even_in_debug(self, resolver):
        rows = [make_row(remote="0.0.0.0", rport=0, state=2), make_row(lport=2)]
        conns = build_connection_set(rows, TargetSpec(("0",)), resolver)
        assert len(conns) == 1
        assert all(c.raddr[0] != "0.0.0.0" for c in conns.values())

    def test_duplicate_tuple_last_wins(self, resolver):
        buf = make_table([make_row(state=5, pid=100), make_row(state=8, pid=200)])
        conns = build_connection_set(decode_table(buf), TargetSpec(("0",)), resolver)
        assert len(conns) == 1
        (conn,) = conns.values()
        assert conn.state == "CLOSE_WAIT"
        assert conn.pid == 200
        assert conn.name == "chrome.exe"


class TestDiff:
    """Tests for the three-way diff."""

    def test_identical_sets(self):
        a = {"k1": make_conn(), "k2": make_conn(lport=2)}
        assert diff_connections(a, dict(a)) == []

    def test_empty_sets(self):
        assert diff_connections({}, {}) == []

    def test_new(self):
        c = make_conn()
        (ev,) = diff_connections({"k": c}, {})
        assert ev.kind is EventKind.NEW
        assert ev.conn == c
        assert ev.prev_state is None

    def test_closed_uses_previous_snapshot(self):
        c = make_conn(state="TIME_WAIT")
        (ev,) = diff_connections({}, {"k": c})
        assert ev.kind is EventKind.CLOSED
        assert ev.conn is c

    def test_changed_order(self):
        (ev,) = diff_connections({"k": make_conn("CLOSE_WAIT")}, {"k": make_conn("ESTABLISHED")})
        assert ev.kind is EventKind.CHANGED
        assert ev.prev_state == "ESTABLISHED"
        assert ev.conn.state == "CLOSE_WAIT"

    def test_one_event_per_key(self):
        prev = {"a": make_conn(), "b": make_conn(), "c": make_conn("SYN_SENT")}
        cur = {"b": make_conn(), "c": make_conn(), "d": make_conn()}
        assert _events(diff_connections(cur, prev)) == {
            (EventKind.CLOSED, "a", None, "ESTABLISHED"),
            (EventKind.CHANGED, "c", "SYN_SENT", "ESTABLISHED"),
            (EventKind.NEW, "d", None, "ESTABLISHED"),
        }

    def test_three_tick_scenario(self, resolver):
        spec = TargetSpec(("java.exe",))
        k1 = dict(lport=50001)
        k2 = dict(lport=50002)

        tick1 = build_connection_set([make_row(**k1)], spec, resolver)
        tick2 = build_connection_set([make_row(**k1), make_row(**k2)], spec, resolver)
        tick3 = build_connection_set([make_row(state=8, **k1)], spec, resolver)

        key1 = "10.0.0.5:50001 -> 93.184.216.34:443"
        key2 = "10.0.0.5:50002 -> 93.184.216.34:443"
        assert _events(diff_connections(tick1, {})) == {(EventKind.NEW, key1, None, "ESTABLISHED")}
        assert _events(diff_connections(tick2, tick1)) == {(EventKind.NEW, key2, None, "ESTABLISHED")}
        assert _events(diff_connections(tick3, tick2)) == {
            (EventKind.CHANGED, key1, "ESTABLISHED", "CLOSE_WAIT"),
            (EventKind.CLOSED, key2, None, "ESTABLISHED"),
        }
