"""
Implements a conduit over a serial port.
"""
import serial

from relaybridge.conduit.base import Conduit, ConduitClosedError


class SerialConduit(Conduit):
    """
    A conduit that provides comms via a serial port.
    """

    def __init__(self, ser: serial.Serial):
        self.ser = ser
        # patch flushing since this causes a lockup if the serial is disconnected during
        # the flush.
        ser.flush = self._no_flush

    def _no_flush(self, *args, **kwargs):
        pass

    @property
    def output(self):
        return self.ser

    @property
    def open(self) -> bool:
        return self.ser.is_open

    def receive(self) -> bytes:
        if not self.ser.is_open:
            raise ConduitClosedError("serial port %s is closed" % self.ser.port)
        try:
            return self.ser.read(self.ser.in_waiting or 1)
        except serial.SerialException as e:
            raise ConduitClosedError(str(e)) from e

    def close(self):
        self.ser.close()
