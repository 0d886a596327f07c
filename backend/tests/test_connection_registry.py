from app.Domains.Appointment.Models.appointment import Appointment
from app.Domains.Realtime.Models.event import DeleteEvent, NewEvent


def test_register_and_unregister(registry, make_connection):
    connection = make_connection("a")

    registry.register(connection)
    assert len(registry) == 1
    assert "a" in registry

    registry.unregister("a")
    registry.unregister("a")
    registry.unregister("never-registered")
    assert len(registry) == 0


def test_broadcast_reaches_every_connection(registry, make_connection):
    connections = [make_connection(str(i)) for i in range(3)]
    for connection in connections:
        registry.register(connection)

    registry.broadcast(DeleteEvent(id="abc"))

    assert all(c.kinds == ["delete"] for c in connections)


def test_unreachable_connection_is_dropped_without_disturbing_others(registry, make_connection):
    reachable = [make_connection(f"ok-{i}") for i in range(4)]
    dead = make_connection("dead", reachable=False)
    registry.register(reachable[0])
    registry.register(dead)
    for connection in reachable[1:]:
        registry.register(connection)

    event = NewEvent(appointment=Appointment.book(name="Ana", phone="555-0001"))
    registry.broadcast(event)  # must not raise

    assert all(c.events == [event] for c in reachable)
    assert "dead" not in registry
    assert dead.closed is True
    assert len(registry) == 4


def test_broadcast_with_no_connections_is_a_no_op(registry):
    registry.broadcast(DeleteEvent(id="abc"))
    assert len(registry) == 0


def test_close_all(registry, make_connection):
    connections = [make_connection(str(i)) for i in range(2)]
    for connection in connections:
        registry.register(connection)

    registry.close_all()

    assert len(registry) == 0
    assert all(c.closed for c in connections)
