from abc import abstractmethod
from io import IOBase


class ConduitClosedError(IOError):
    """ The far end closed the conduit. """


class Conduit:
    """
    A conduit allows two-way communication. Data is read with receive() and written to a file-like output endpoint.
    """

    @property
    @abstractmethod
    def output(self) -> IOBase:
        """ fetches the I/O stream that provides output.
            Callers can use the usual writeXXX() methods. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ determines if this conduit is open. When open, it can be received from and sent to."""
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """
        Closes both the input and output streams.
        """
        raise NotImplementedError

    @abstractmethod
    def receive(self) -> bytes:
        """
        Blocks until some data is available, or a read timeout expires.
        :return: the bytes read, which are empty when the read timed out.
        :raises ConduitClosedError: when the far end has closed the conduit.
        """
        raise NotImplementedError

    def send(self, data: bytes):
        """ writes the data and flushes it through to the device. """
        out = self.output
        out.write(data)
        out.flush()
