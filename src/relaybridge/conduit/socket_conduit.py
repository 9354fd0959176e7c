import socket

from relaybridge.conduit import base

receive_size = 1024


class SocketConduit(base.Conduit):
    """
    A conduit that provides communication via a socket.
    :param sock The open, connected socket
    """
    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.read = sock.makefile('rb')
        self.write = sock.makefile('wb')

    @property
    def open(self) -> bool:
        return self.sock.fileno() > 0

    @property
    def output(self):
        return self.write

    def receive(self) -> bytes:
        data = self.read.read1(receive_size)
        if not data:
            raise base.ConduitClosedError("socket closed by peer")
        return data

    def close(self):
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass    # the peer may have closed the socket already
        finally:
            self.read.close()
            self.write.close()
            self.sock.close()
