import logging

from serial import Serial, SerialException

from relaybridge.conduit.base import Conduit
from relaybridge.conduit.serial_conduit import SerialConduit
from relaybridge.connector.base import ConnectorError, AbstractConnector

logger = logging.getLogger(__name__)

default_baudrate = 19200
default_read_timeout = 0.5


def serial_for_path(path, baudrate=default_baudrate, timeout=default_read_timeout) -> Serial:
    """ creates an unopened Serial instance for the device path. """
    ser = Serial()
    ser.port = path
    ser.baudrate = baudrate
    ser.timeout = timeout
    return ser


class SerialConnector(AbstractConnector):
    """
    Implements a connector that communicates data via a Serial link.
    """
    def __init__(self, serial: Serial):
        """
        Creates a new serial connector.
        :param serial - the serial object defining the serial port to connect to.
                The serial instance should not be open.
        """
        super().__init__()
        self._serial = serial
        if serial.is_open:
            raise ValueError("serial object should be initially closed")

    @property
    def endpoint(self):
        return self._serial.port

    def _connected(self):
        return self._serial.is_open

    def _try_open(self):
        s = self._serial
        if not s.is_open:
            try:
                s.open()
                logger.info("opened serial port %s" % s.port)
            except SerialException as e:
                logger.warning("error opening serial port %s: %s" % (s.port, e))
                raise ConnectorError(str(e)) from e

    def _connect(self) -> Conduit:
        self._try_open()
        return SerialConduit(self._serial)
