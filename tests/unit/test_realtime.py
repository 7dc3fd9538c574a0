import asyncio

from clinic_booking.services.realtime import ConnectionManager


class FakeSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_emit_without_connections_is_a_no_op():
    ConnectionManager().emit("appointmentCreated", {"id": 1})


def test_emit_broadcasts_and_drops_broken_sockets():
    manager = ConnectionManager()
    good, broken = FakeSocket(), FakeSocket(fail=True)

    async def scenario():
        await manager.connect(good)
        await manager.connect(broken)
        manager.emit("appointmentDeleted", {"id": 4})
        await asyncio.sleep(0.01)

    asyncio.run(scenario())

    assert good.accepted
    assert good.sent == [{"event": "appointmentDeleted", "data": {"id": 4}}]
    assert manager.connection_count == 1
