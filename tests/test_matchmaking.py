def test_first_join_is_queued(controller, connect):
    x, x_conn = connect()

    assert controller.matchmaking.join(x) is None
    assert x_conn.pop() == [{"type": "queued"}]
    assert x in controller.state.queue


def test_match_assigns_roles_by_arrival(controller, connect):
    x, x_conn = connect()
    y, y_conn = connect()
    controller.matchmaking.join(x)
    x_conn.pop()

    room = controller.matchmaking.join(y)

    assert (room.first, room.second) == (x, y)
    assert x_conn.pop() == [{"type": "matched", "role": "answerer", "peerId": y}]
    assert y_conn.pop() == [{"type": "matched", "role": "offerer", "peerId": x}]
    assert len(controller.state.queue) == 0


def test_longest_waiting_peer_is_matched_first(controller, connect):
    a, _ = connect()
    b, _ = connect()
    c, _ = connect()
    controller.state.queue.enqueue(a)
    controller.state.queue.enqueue(b)

    room = controller.matchmaking.join(c)

    assert room.first == a
    assert list(controller.state.queue) == [b]


def test_join_from_unknown_peer_is_ignored(controller):
    assert controller.matchmaking.join("ghost") is None
    assert len(controller.state.queue) == 0


def test_rejoin_while_queued_keeps_single_entry(controller, connect):
    x, x_conn = connect()
    controller.matchmaking.join(x)
    controller.matchmaking.join(x)

    assert list(controller.state.queue) == [x]
    assert x_conn.pop() == [{"type": "queued"}, {"type": "queued"}]


def test_rejoin_while_paired_abandons_partner(controller, connect, invariants):
    x, x_conn = connect()
    y, y_conn = connect()
    controller.matchmaking.join(x)
    controller.matchmaking.join(y)
    x_conn.pop()
    y_conn.pop()

    controller.matchmaking.join(y)

    assert x_conn.pop() == [{"type": "peer-left"}]
    assert y_conn.pop() == [{"type": "queued"}]
    assert x not in controller.state.rooms
    assert list(controller.state.queue) == [y]
    invariants()


def test_stale_queue_entry_is_skipped(controller, connect):
    x, x_conn = connect()
    y, _ = connect()
    controller.state.queue.enqueue("gone")
    controller.state.queue.enqueue(x)

    room = controller.matchmaking.join(y)

    assert room.first == x


def test_leave_returns_partner_once(controller, connect):
    x, _ = connect()
    y, y_conn = connect()
    controller.matchmaking.join(x)
    controller.matchmaking.join(y)
    y_conn.pop()

    assert controller.matchmaking.leave(x) == y
    assert controller.matchmaking.leave(x) is None
    assert y_conn.pop() == [{"type": "peer-left"}]
