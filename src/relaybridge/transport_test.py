import unittest
from unittest.mock import Mock, patch, call

from hamcrest import assert_that, is_, none, instance_of, calling, raises

from relaybridge.connector.base import ConnectionNotConnectedError, ConnectorError
from relaybridge.model import Channel, Module
from relaybridge.transport import ModuleConfigurationError, SerialTransport, TcpTransport, transport_for, \
    parse_tcp_address, parse_device_path


def usb_module():
    return Module("A", "usb:/dev/ttyX", statuscommand=b"\x5b", channels=[
        Channel("1", 0, b"\x01", b"\x00", statusmask=1),
        Channel("2", 1, b"\x03", b"\x02", statusmask=1)])


class TransportForTest(unittest.TestCase):

    def setUp(self):
        self.status = Mock()

    def test_http_has_no_transport(self):
        assert_that(transport_for(Module("H", "http://relay.local/io.cgi"), self.status), is_(none()))
        assert_that(transport_for(Module("H", "https://relay.local"), self.status), is_(none()))

    @patch('relaybridge.transport.SocketConnector')
    def test_tcp(self, connector):
        sut = transport_for(Module("B", "tcp:relay.local:17494"), self.status)
        assert_that(sut, is_(instance_of(TcpTransport)))
        connector.assert_called_once_with("relay.local", 17494)

    @patch('relaybridge.transport.serial_for_path')
    @patch('relaybridge.transport.SerialConnector')
    def test_usb(self, connector, serial_for_path):
        sut = transport_for(usb_module(), self.status)
        assert_that(sut, is_(instance_of(SerialTransport)))
        serial_for_path.assert_called_once_with("/dev/ttyX")
        connector.assert_called_once_with(serial_for_path.return_value)

    def test_unknown_scheme(self):
        assert_that(calling(transport_for).with_args(Module("X", "udp:host:1"), self.status),
                    raises(ModuleConfigurationError, "invalid communication protocol"))

    def test_missing_address(self):
        for cstring in ("tcp:host", "tcp::9999", "tcp:host:", "tcp:host:port"):
            assert_that(calling(parse_tcp_address).with_args(cstring), raises(ModuleConfigurationError))
        for cstring in ("usb:", "usb", "usb:  "):
            assert_that(calling(parse_device_path).with_args(cstring), raises(ModuleConfigurationError))


class SerialTransportTest(unittest.TestCase):

    def setUp(self):
        self.status = Mock()
        self.connector = Mock()
        self.conduit = self.connector.conduit
        self.sut = SerialTransport(usb_module(), "/dev/ttyX", self.status, connector=self.connector)

    def test_starts_disconnected(self):
        assert_that(self.sut.connected, is_(False))

    def test_open_requests_status_snapshot(self):
        self.sut.on_connected()
        assert_that(self.sut.connected, is_(True))
        self.conduit.send.assert_called_once_with(b"\x5b")

    def test_toggle_writes_command_then_status_poll(self):
        channel = self.sut.module.channels[0]
        self.sut.send_toggle(channel, 1)
        self.conduit.send.assert_has_calls([call(b"\x01"), call(b"\x5b")])
        self.conduit.reset_mock()
        self.sut.send_toggle(channel, 0)
        self.conduit.send.assert_has_calls([call(b"\x00"), call(b"\x5b")])

    def test_status_bytes_are_framed_and_decoded(self):
        assert_that(self.sut.on_data(b"\x01\x00\x02"), is_([[1, 0], [0, 1]]))

    def test_close(self):
        self.sut.on_connected()
        self.sut.on_disconnected()
        assert_that(self.sut.connected, is_(False))
        self.status.notify.assert_called_with("connection closed for module A")

    def test_write_failure_disconnects(self):
        self.sut.on_connected()
        self.conduit.send.side_effect = OSError("device gone")
        self.sut.send_toggle(self.sut.module.channels[0], 1)
        assert_that(self.sut.connected, is_(False))
        self.connector.disconnect.assert_called_once()
        self.status.error.assert_called_once()

    def test_write_when_connector_closed(self):
        type(self.connector).conduit = property(Mock(side_effect=ConnectionNotConnectedError("closed")))
        self.sut.send_status_poll()
        assert_that(self.sut.connected, is_(False))

    def test_handles_own_connector_events(self):
        assert_that(self.sut.handles(Mock(connector=self.connector)), is_(True))
        assert_that(self.sut.handles(Mock(connector=Mock())), is_(False))

    @patch('relaybridge.transport.ConnectionReader')
    def test_connect_starts_reader_once(self, reader):
        sink = Mock()
        self.sut.connect(sink)
        self.sut.connect(sink)
        reader.assert_called_once_with(self.connector, sink)
        reader.return_value.start.assert_called_once()

    @patch('relaybridge.transport.ConnectionReader')
    def test_disconnect(self, reader):
        self.sut.connect(Mock())
        self.sut.on_connected()
        self.sut.disconnect()
        reader.return_value.stop.assert_called_once()
        self.connector.disconnect.assert_called_once()
        assert_that(self.sut.connected, is_(False))


class TcpTransportTest(unittest.TestCase):

    def setUp(self):
        self.status = Mock()
        self.connector = Mock()
        module = Module("B", "tcp:host:9999", channels=[
            Channel("1", 0, b"on1", b"off1"), Channel("2", 1, b"on2", b"off2", statuscommand=b"?")])
        self.sut = TcpTransport(module, "host", 9999, self.status, connector=self.connector)

    def test_toggle(self):
        self.sut.on_connected()
        self.sut.send_toggle(self.sut.module.channels[0], 1)
        self.sut.send_toggle(self.sut.module.channels[1], 0)
        self.connector.conduit.send.assert_has_calls([call(b"on1"), call(b"off2"), call(b"?")])

    def test_open_does_not_poll(self):
        self.sut.on_connected()
        self.connector.conduit.send.assert_not_called()
        self.status.notify.assert_called_once_with("TCP socket opened for module B")

    def test_fail_is_reported_without_changing_state(self):
        self.sut.on_connected()
        assert_that(self.sut.on_data(b"fail"), is_([]))
        self.status.error.assert_called_once_with("TCP command failure on module B")
        assert_that(self.sut.connected, is_(True))

    def test_other_responses_are_ignored(self):
        assert_that(self.sut.on_data(b"ok"), is_([]))
        self.status.error.assert_not_called()

    def test_failed_open_is_reported(self):
        self.sut.on_failed(ConnectorError("Connection refused"))
        self.status.error.assert_called_once_with("cannot open connection to module B (Connection refused)")
        self.status.notify.assert_not_called()
        assert_that(self.sut.connected, is_(False))
