import json

import pytest

from signaling.lifecycle import ConnectionLifecycleController


class FakeConnection:
    """Records frames the broker sends; can be switched off to mimic a dead socket."""

    def __init__(self):
        self.frames = []
        self.open = True

    def send(self, data: str) -> bool:
        if not self.open:
            return False
        self.frames.append(data)
        return True

    @property
    def messages(self):
        return [json.loads(f) for f in self.frames]

    def pop(self):
        messages = self.messages
        self.frames.clear()
        return messages


@pytest.fixture
def make_connection():
    return FakeConnection


@pytest.fixture
def controller():
    return ConnectionLifecycleController()


@pytest.fixture
def connect(controller):
    def _connect():
        conn = FakeConnection()
        peer_id = controller.on_open(conn)
        return peer_id, conn

    return _connect


@pytest.fixture
def send(controller):
    def _send(peer_id, message):
        controller.on_message(peer_id, json.dumps(message))

    return _send


def check_invariants(controller):
    state = controller.state
    for peer_id in state.queue:
        assert peer_id in state.peers
        assert peer_id not in state.rooms
    for peer in state.peers:
        room = state.rooms.room_of(peer.id)
        if room is not None:
            partner = room.partner_of(peer.id)
            assert partner != peer.id
            assert state.rooms.room_of(partner) is room


@pytest.fixture
def invariants(controller):
    return lambda: check_invariants(controller)
