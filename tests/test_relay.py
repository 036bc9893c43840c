import json


def _pair(controller, connect):
    x, x_conn = connect()
    y, y_conn = connect()
    z, z_conn = connect()
    controller.matchmaking.join(x)
    controller.matchmaking.join(y)
    for conn in (x_conn, y_conn, z_conn):
        conn.pop()
    return (x, x_conn), (y, y_conn), (z, z_conn)


def test_forward_delivers_payload_verbatim_to_partner_only(controller, connect):
    (x, x_conn), (y, y_conn), (z, z_conn) = _pair(controller, connect)
    payload = '{"sdp":"abc",  "type":"offer", "extra":[1,2]}'

    assert controller.relay.forward(x, payload)

    assert y_conn.frames == [payload]
    assert x_conn.frames == []
    assert z_conn.frames == []


def test_forward_while_unpaired_reports_error(controller, connect):
    (_, _), (_, _), (z, z_conn) = _pair(controller, connect)

    assert not controller.relay.forward(z, json.dumps({"type": "ice", "candidate": {}}))
    assert z_conn.pop() == [{"type": "error", "message": "not paired"}]


def test_forward_to_dead_partner_fails_silently(controller, connect):
    (x, x_conn), (y, y_conn), _ = _pair(controller, connect)
    y_conn.open = False

    assert not controller.relay.forward(x, '{"type": "answer", "sdp": "a"}')
    assert x_conn.frames == []
    assert controller.state.rooms.partner_of(x) == y
