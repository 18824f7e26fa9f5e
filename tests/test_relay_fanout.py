# tests/test_relay_fanout.py


def _messages(client):
    out = []
    for r in client.get_received():
        if r["name"] != "message":
            continue
        # le client de test ne met pas "message" dans une liste d'args
        args = r["args"]
        out.append(args[0] if isinstance(args, list) else args)
    return out


def test_message_reaches_every_client_including_sender(connect):
    a = connect()
    b = connect()
    a.emit("message", "hello")
    assert _messages(a) == ["hello"]
    assert _messages(b) == ["hello"]


def test_payload_is_forwarded_unchanged(connect):
    a = connect()
    b = connect()
    payload = {"text": "Q3", "lines": [1, 2, 3], "nested": {"ok": True}}
    a.emit("message", payload)
    assert _messages(b) == [payload]


def test_late_joiner_gets_no_replay(connect):
    a = connect()
    a.emit("message", "before")
    assert _messages(a) == ["before"]
    late = connect()
    assert _messages(late) == []
    a.emit("message", "after")
    assert _messages(late) == ["after"]


def test_disconnected_client_stops_receiving(app, http, connect):
    a = connect()
    b = connect()
    a.emit("message", "hello")
    assert _messages(a) == ["hello"]
    assert _messages(b) == ["hello"]

    a.disconnect()
    assert not a.is_connected()
    assert http.get("/healthz").get_json()["clients"] == 1

    b.emit("message", "world")
    assert _messages(b) == ["world"]


def test_order_is_kept_per_sender(connect):
    a = connect()
    b = connect()
    for i in range(5):
        a.emit("message", f"m{i}")
    assert _messages(b) == [f"m{i}" for i in range(5)]


def test_each_message_delivered_once_per_client(connect):
    clients = [connect() for _ in range(4)]
    clients[2].emit("message", "x")
    for c in clients:
        assert _messages(c) == ["x"]


def test_registry_tracks_connections(app, connect):
    reg = app.extensions["connections"]
    assert reg.count() == 0
    a = connect()
    connect()
    assert reg.count() == 2
    assert len(reg.snapshot()) == 2
    a.disconnect()
    assert reg.count() == 1


def test_extra_arguments_only_first_is_relayed(connect):
    a = connect()
    b = connect()
    a.emit("message", "first", "second", {"third": 3})
    assert _messages(a) == ["first"]
    assert _messages(b) == ["first"]
