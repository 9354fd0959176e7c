"""
One connection to one relay module, and the protocol spoken over it.

The connection string of a module selects the variant once, at setup:

- ``tcp:host:port`` - a TcpTransport speaking the ASCII command protocol
- ``usb:/device/path`` - a SerialTransport polling the module status byte
- ``http:...`` and ``https:...`` - accepted, but no connection is made

All variants are driven from a single dispatching thread. The blocking connect and reads happen on
the transport's ConnectionReader thread, which only posts events; the dispatcher hands them back
to on_connected, on_disconnected, on_failed and on_data.
"""
import logging

from relaybridge.connector.base import Connector, ConnectorError
from relaybridge.connector.serialconn import SerialConnector, serial_for_path
from relaybridge.connector.socketconn import SocketConnector
from relaybridge.model import Channel, Module
from relaybridge.protocol.codecs import ProtocolCodec, SerialBitmaskCodec, TcpAsciiCodec
from relaybridge.protocol.framing import ByteLengthFramer
from relaybridge.protocol.reader import ConnectionReader

logger = logging.getLogger(__name__)

UNCONNECTED_SCHEMES = ('http', 'https')


class ModuleConfigurationError(ValueError):
    """ The module connection string cannot be used. """


class Transport:
    """
    Owns the connection to a module. The connection starts disconnected, becomes connected when the
    connector opens, and stays disconnected once closed.
    """

    def __init__(self, module: Module, connector: Connector, codec: ProtocolCodec, status):
        self.module = module
        self.connector = connector
        self.codec = codec
        self.status = status
        self.connected = False
        self.reader = None

    def connect(self, sink):
        """ starts opening the connection in the background. Events are posted to the sink. """
        if self.reader is None:
            self.reader = ConnectionReader(self.connector, sink)
            self.reader.start()

    def disconnect(self):
        reader = self.reader
        if reader is not None:
            reader.stop()
        self.connector.disconnect()
        self.connected = False

    def handles(self, event):
        return getattr(event, 'connector', None) is self.connector

    def on_connected(self):
        self.connected = True

    def on_disconnected(self):
        if self.connected:
            self.status.notify("connection closed for module %s" % self.module.id)
        self.connected = False

    def on_failed(self, error):
        self.status.error("cannot open connection to module %s (%s)" % (self.module.id, error))
        self.connected = False

    def on_data(self, data: bytes):
        """
        handles data received from the module.
        :return: a list of status reports; each is a list of channel states in channel order
        """
        return []

    def send_toggle(self, channel: Channel, value):
        self._write(self.codec.encode_toggle(self.module, channel, value))

    def send_status_poll(self):
        self._write(self.codec.encode_status_poll(self.module))

    def _write(self, commands):
        try:
            conduit = self.connector.conduit
            for command in commands:
                logger.debug("writing %r to module %s" % (command, self.module.id))
                conduit.send(command)
        except (ConnectorError, OSError) as e:
            self.status.error("write to module %s failed (%s)" % (self.module.id, e))
            self.connected = False
            self.connector.disconnect()


class TcpTransport(Transport):

    def __init__(self, module, host, port, status, connector=None):
        super().__init__(module, connector or SocketConnector(host, port), TcpAsciiCodec(), status)

    def on_connected(self):
        super().on_connected()
        self.status.notify("TCP socket opened for module %s" % self.module.id)

    def on_data(self, data):
        logger.debug("TCP data received from %s [%s]" % (self.module.id, data.decode('latin-1')))
        if self.codec.is_failure(data):
            self.status.error("TCP command failure on module %s" % self.module.id)
        return []


class SerialTransport(Transport):

    def __init__(self, module, path, status, connector=None):
        super().__init__(module, connector or SerialConnector(serial_for_path(path)), SerialBitmaskCodec(), status)
        self.framer = ByteLengthFramer(self.codec.frame_length)

    def on_connected(self):
        super().on_connected()
        self.status.notify("serial port opened for module %s" % self.module.id)
        self.framer.reset()
        self.send_status_poll()

    def on_data(self, data):
        reports = []
        for frame in self.framer.feed(data):
            logger.debug("serial data received from %s [%d]" % (self.module.id, frame[0]))
            states = self.codec.decode_status(frame[0], self.module.channels)
            if states is not None:
                reports.append(states)
        return reports


def parse_tcp_address(cstring):
    """
    >>> parse_tcp_address('tcp:192.168.1.20:17494')
    ('192.168.1.20', 17494)
    """
    parts = cstring.split(':')
    host = parts[1].strip() if len(parts) > 1 else ''
    port = parts[2].strip() if len(parts) > 2 else ''
    if not host or not port:
        raise ModuleConfigurationError("bad or missing port/hostname")
    try:
        return host, int(port)
    except ValueError:
        raise ModuleConfigurationError("bad or missing port/hostname")


def parse_device_path(cstring):
    """
    >>> parse_device_path('usb:/dev/ttyACM0')
    '/dev/ttyACM0'
    """
    path = cstring.split(':', 1)[1].strip() if ':' in cstring else ''
    if not path:
        raise ModuleConfigurationError("bad or missing device path")
    return path


def transport_for(module: Module, status):
    """
    Selects the transport for a module from its connection string.
    :return: the transport, or None for a module that is accepted without a connection
    :raises ModuleConfigurationError: when the scheme is unknown or the address is incomplete
    """
    scheme = module.scheme
    if scheme in UNCONNECTED_SCHEMES:
        return None
    if scheme == 'tcp':
        host, port = parse_tcp_address(module.cstring)
        return TcpTransport(module, host, port, status)
    if scheme == 'usb':
        return SerialTransport(module, parse_device_path(module.cstring), status)
    raise ModuleConfigurationError("invalid communication protocol")
