import asyncio
from uuid import uuid4

from selfcare.realtime.hub import EventType, NotificationHub, group_room, user_room


def _run(coroutine):
    return asyncio.run(coroutine)


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.frames = []
        self.fail = fail

    async def send_json(self, data) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.frames.append(data)


def test_emit_to_user_reaches_only_that_room() -> None:
    hub = NotificationHub()
    alice_id, bob_id = uuid4(), uuid4()
    alice, bob = FakeSocket(), FakeSocket()
    hub.join(alice, user_room(alice_id))
    hub.join(bob, user_room(bob_id))

    delivered = _run(hub.emit_to_user(alice_id, EventType.FRIEND_REQUEST, {"from": bob_id}))

    assert delivered == 1
    assert alice.frames == [{"event": "friend-request", "data": {"from": str(bob_id)}}]
    assert bob.frames == []


def test_emit_excludes_sender() -> None:
    hub = NotificationHub()
    group_id = uuid4()
    sender, listener = FakeSocket(), FakeSocket()
    hub.join(sender, group_room(group_id))
    hub.join(listener, group_room(group_id))

    delivered = _run(hub.emit(group_room(group_id), "challenge-progress", {"p": 1}, exclude=sender))

    assert delivered == 1
    assert sender.frames == []
    assert listener.frames[0]["event"] == "challenge-progress"


def test_dead_socket_is_dropped_from_every_room() -> None:
    hub = NotificationHub()
    user_id, group_id = uuid4(), uuid4()
    dead = FakeSocket(fail=True)
    hub.join(dead, user_room(user_id))
    hub.join(dead, group_room(group_id))

    assert _run(hub.emit_to_user(user_id, EventType.ACTIVITY_LIKE, {})) == 0
    assert hub.rooms_of(dead) == set()
    assert hub.get_stats()["dropped_connections"] == 1


def test_leave_and_disconnect_clean_up_rooms() -> None:
    hub = NotificationHub()
    socket = FakeSocket()
    hub.join(socket, "user-a")
    hub.join(socket, "group-b")

    hub.leave(socket, "user-a")
    assert hub.room_size("user-a") == 0
    assert hub.rooms_of(socket) == {"group-b"}

    hub.disconnect(socket)
    assert hub.get_stats()["rooms"] == 0


def test_emit_to_empty_room_is_a_noop() -> None:
    hub = NotificationHub()
    assert _run(hub.emit_to_group(uuid4(), EventType.GROUP_INVITATION, {})) == 0
