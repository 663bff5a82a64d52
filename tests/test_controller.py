from __future__ import annotations

import asyncio

from tv_wifi_remote import (
    BrandRegistry,
    ControllerState,
    DiscoveredDevice,
    ProtocolHandler,
    RemoteController,
  )

from fakes import FakeProbe, FakeHttpClient

class RecordingHandler(ProtocolHandler):
    """Logs connects, disconnects and sends to a shared list."""

    protocol_name = "Recording"
    default_port = 1234
    brand = "Rec"
    commands = {"Power": "PWR", "Mute": "MUTE"}

    log: list = []
    connect_result = True
    count = 0

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        RecordingHandler.count += 1
        self.number = RecordingHandler.count

    async def handshake(self, device):
        self.log.append(f"connect {self.number}")
        return self.connect_result

    async def send_code(self, device, code):
        self.log.append(f"send {self.number} {code}")
        return True

    def disconnect(self):
        self.log.append(f"disconnect {self.number}")
        super().disconnect()

class SlowConnectHandler(RecordingHandler):
    started: asyncio.Event
    release: asyncio.Event

    async def handshake(self, device):
        self.started.set()
        await self.release.wait()
        return True

class SlowSendHandler(RecordingHandler):
    in_flight = 0
    max_in_flight = 0

    async def send_code(self, device, code):
        cls = SlowSendHandler
        cls.in_flight += 1
        cls.max_in_flight = max(cls.max_in_flight, cls.in_flight)
        await asyncio.sleep(0.01)
        cls.in_flight -= 1
        return True

class BrokenHandler(RecordingHandler):
    async def discover(self, timeout=None):
        raise RuntimeError("no network")

    async def send_key(self, button_name):
        raise RuntimeError("boom")

def make_controller(handler_class=RecordingHandler):
    RecordingHandler.log = []
    RecordingHandler.count = 0
    registry = BrandRegistry(
        probe=FakeProbe(),
        http=FakeHttpClient(),
        handler_classes={'rec': handler_class},
      )
    return RemoteController(registry)

def device(ip='192.168.1.10'):
    return DiscoveredDevice(name="Rec TV", ip_address=ip, brand="Rec", port=1234)

def test_send_while_idle_fails():
    async def amain():
        controller = make_controller()
        return controller, await controller.send_command("Power")

    controller, sent = asyncio.run(amain())
    assert sent is False
    assert RecordingHandler.log == []
    assert not controller.is_connected()
    assert controller.connection_state.state is ControllerState.IDLE

def test_connect_and_send():
    async def amain():
        controller = make_controller()
        assert await controller.connect("Rec", device())
        assert await controller.send_command("Power")
        return controller

    controller = asyncio.run(amain())
    assert controller.is_connected()
    assert controller.active_brand == "Rec"
    assert controller.protocol_name == "Recording"
    assert controller.connected_device == device()
    assert RecordingHandler.log == ["connect 1", "send 1 PWR"]

def test_reconnect_tears_down_previous_connection_first():
    async def amain():
        controller = make_controller()
        assert await controller.connect("Rec", device('192.168.1.10'))
        assert await controller.connect("Rec", device('192.168.1.11'))
        return controller

    controller = asyncio.run(amain())
    assert RecordingHandler.log == ["connect 1", "disconnect 1", "connect 2"]
    assert controller.connected_device.ip_address == '192.168.1.11'
    assert controller.connection_state.handler.number == 2

def test_failed_connect_leaves_controller_idle():
    class Refusing(RecordingHandler):
        connect_result = False

    async def amain():
        controller = make_controller(Refusing)
        return controller, await controller.connect("Rec", device())

    controller, connected = asyncio.run(amain())
    assert connected is False
    assert controller.connection_state.state is ControllerState.IDLE
    assert controller.connection_state.handler is None
    assert controller.connected_device is None
    assert controller.active_brand is None

def test_connection_events():
    async def amain():
        controller = make_controller()
        subscription = controller.events.subscribe()
        await controller.connect("Rec", device())
        controller.disconnect()
        controller.disconnect()
        events = []
        while True:
            event = subscription.get_nowait()
            if event is None:
                break
            events.append(event)
        return events

    events = asyncio.run(amain())
    assert [e.state for e in events] == [
        ControllerState.CONNECTING,
        ControllerState.CONNECTED,
        ControllerState.IDLE,
    ]
    assert events[1].protocol_name == "Recording"
    assert events[1].device == device()
    assert events[1].brand == "Rec"

def test_disconnect_during_connect_abandons_connection():
    async def amain():
        controller = make_controller(SlowConnectHandler)
        SlowConnectHandler.started = asyncio.Event()
        SlowConnectHandler.release = asyncio.Event()
        task = asyncio.ensure_future(controller.connect("Rec", device()))
        await SlowConnectHandler.started.wait()
        assert controller.connection_state.state is ControllerState.CONNECTING
        controller.disconnect()
        SlowConnectHandler.release.set()
        return controller, await task

    controller, connected = asyncio.run(amain())
    assert connected is False
    assert not controller.is_connected()
    assert controller.connection_state.state is ControllerState.IDLE
    assert RecordingHandler.log[-1] == "disconnect 1"

def test_sends_are_serialized():
    async def amain():
        controller = make_controller(SlowSendHandler)
        SlowSendHandler.in_flight = 0
        SlowSendHandler.max_in_flight = 0
        assert await controller.connect("Rec", device())
        return await asyncio.gather(*(controller.send_command("Mute") for _ in range(5)))

    results = asyncio.run(amain())
    assert results == [True] * 5
    assert SlowSendHandler.max_in_flight == 1

def test_disconnect_during_send_is_safe():
    async def amain():
        controller = make_controller(SlowSendHandler)
        assert await controller.connect("Rec", device())
        task = asyncio.ensure_future(controller.send_command("Mute"))
        await asyncio.sleep(0)
        controller.disconnect()
        await task
        return controller, await controller.send_command("Mute")

    controller, sent_after = asyncio.run(amain())
    assert sent_after is False
    assert controller.connection_state.state is ControllerState.IDLE

def test_handler_exceptions_degrade():
    async def amain():
        controller = make_controller(BrokenHandler)
        devices = await controller.discover_devices("Rec")
        assert await controller.connect("Rec", device())
        return devices, await controller.send_command("Power")

    devices, sent = asyncio.run(amain())
    assert devices == []
    assert sent is False

def test_connect_by_address():
    async def amain():
        controller = make_controller()
        bad = await controller.connect_by_address("Rec", "not.an.ip.address")
        good = await controller.connect_by_address("Rec", " 192.168.1.20 ")
        return controller, bad, good

    controller, bad, good = asyncio.run(amain())
    assert bad is False
    assert good is True
    assert RecordingHandler.log == ["connect 1"]
    assert controller.connected_device == DiscoveredDevice(
        name="Rec TV", ip_address="192.168.1.20", brand="Rec", port=1234)

def test_discover_devices_uses_resolved_handler():
    async def amain():
        controller = make_controller()
        return await controller.discover_devices("Rec")

    assert asyncio.run(amain()) == []

def test_controller_can_be_driven_from_successive_event_loops():
    controller = make_controller(SlowSendHandler)

    async def amain():
        assert await controller.connect("Rec", device())
        return await asyncio.gather(*(controller.send_command("Mute") for _ in range(3)))

    assert asyncio.run(amain()) == [True] * 3
    assert asyncio.run(amain()) == [True] * 3
    assert controller.is_connected()
