import logging
import socket

from relaybridge.conduit.base import Conduit
from relaybridge.conduit.socket_conduit import SocketConduit
from relaybridge.connector.base import AbstractConnector, ConnectorError

logger = logging.getLogger(__name__)


class SocketConnector(AbstractConnector):
    """
    A connector that communicates data via a TCP socket
    """
    def __init__(self, host, port, connect_timeout=None):
        """
        :param host: the hostname or ip address to connect to
        :param port: the TCP port
        :param connect_timeout: seconds to wait for the connection to open. None waits indefinitely.
        """
        super().__init__()
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout

    @property
    def endpoint(self):
        return self.host, self.port

    def _connect(self) -> Conduit:
        try:
            sock = socket.create_connection(self.endpoint, timeout=self.connect_timeout)
            sock.settimeout(None)
            logger.info("opened socket to %s:%s" % self.endpoint)
            return SocketConduit(sock)
        except OSError as e:
            logger.warning("error opening socket to %s:%s: %s" % (self.host, self.port, e))
            raise ConnectorError(str(e)) from e
