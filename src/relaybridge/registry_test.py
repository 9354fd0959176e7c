import unittest

from hamcrest import assert_that, is_, contains_exactly

from relaybridge.model import Channel, Module, Options
from relaybridge.registry import ChannelRegistry, make_delta


def options(default="control.relays."):
    a = Module("A", "usb:/dev/ttyX", channels=[
        Channel("1", 0, b"\x01", b"\x00", name="Pump"),
        Channel("2", 1, b"\x03", b"\x02", trigger="notifications.tanks.bilge")])
    b = Module("B", "tcp:host:9999", channels=[Channel("1", 0, b"on", b"off")])
    return Options(default, [a, b])


class ChannelRegistryTest(unittest.TestCase):

    def test_keys_are_module_dot_channel(self):
        sut = ChannelRegistry(options())
        assert_that(sut.keys(), contains_exactly("A.1", "A.2", "B.1"))
        assert_that(len(set(sut.keys())), is_(3))

    def test_paths(self):
        binding = ChannelRegistry(options()).binding("A.1")
        assert_that(binding.state_path, is_("electrical.switches.A.1.state"))
        assert_that(binding.meta_path, is_("electrical.switches.A.1.meta"))

    def test_trigger_path_prefers_channel_trigger(self):
        sut = ChannelRegistry(options())
        assert_that(sut.trigger_path(sut.binding("A.2")), is_("notifications.tanks.bilge"))
        assert_that(sut.trigger_path(sut.binding("A.1")), is_("control.relays.A.1"))

    def test_default_trigger_prefix_gets_separator(self):
        sut = ChannelRegistry(options("control.relays"))
        assert_that(sut.trigger_path(sut.binding("B.1")), is_("control.relays.B.1"))

    def test_meta_values(self):
        sut = ChannelRegistry(options())
        assert_that(sut.meta_values(), is_([
            ("electrical.switches.A.1.meta", {"type": "relay", "name": "Pump"}),
            ("electrical.switches.A.2.meta", {"type": "relay", "name": None}),
            ("electrical.switches.B.1.meta", {"type": "relay", "name": None})]))

    def test_state_values_in_channel_order(self):
        sut = ChannelRegistry(options())
        module = sut.modules[0]
        assert_that(sut.state_values(module, [1, 0]), is_([
            ("electrical.switches.A.1.state", 1), ("electrical.switches.A.2.state", 0)]))

    def test_make_delta(self):
        assert_that(make_delta("devantech", [("p", 0), ("q", 1)]), is_({"updates": [{
            "source": {"device": "devantech"},
            "values": [{"path": "p", "value": 0}, {"path": "q", "value": 1}]}]}))
