"""
Runs the blocking side of a connection on a background thread.

The thread opens the connector and then reads from its conduit until the conduit closes or the
loop is stopped. Nothing is handled on the background thread: connection events and received
data are posted to an event sink, to be handled by whichever thread dispatches that sink.
"""
import logging
import threading

from relaybridge.conduit.base import ConduitClosedError
from relaybridge.connector.base import Connector, ConnectorError, ConnectorFailedEvent

logger = logging.getLogger(__name__)


class DataReceivedEvent:
    """ Data was read from a connector's conduit. """
    def __init__(self, connector, data: bytes):
        self.connector = connector
        self.data = data


class AsyncLoop:
    """ Continually runs a given function on a background thread.
        Exceptions are logged and posted to a given handler
        The background thread is registered as a daemon.
    """

    def __init__(self, fn=None, args=(), log=logger):
        """
        :param fn the function to run
        :param args arguments to pass to fn
        """
        self.fn = fn
        self.args = args
        self.stop_event = threading.Event()
        self.background_thread = None
        self.logger = log

    def start(self):
        if self.background_thread is None:
            t = threading.Thread(target=self._run, daemon=True)
            self.background_thread = t
            t.start()

    def exception_handler(self, e):
        self.logger.exception(e)

    def _run(self):
        """ The processing loop for the background thread.
             Invokes the callable for as long as the stop signal is not received.
        """
        if self._do(self.startup):
            while self.running():
                self._do(self.loop)
        self._do(self.shutdown)
        self.logger.debug("background thread exiting")

    def _do(self, callme):
        """ runs a function and captures any exceptions
            :return: False if the function raised an exception
        """
        try:
            callme()
            return True
        except Exception as e:
            self.exception_handler(e)
            return False

    def startup(self):
        """ template method called when the thread starts"""

    def loop(self):
        self.fn(*self.args)

    def shutdown(self):
        """ template method called when the thread exits """

    def running(self):
        return not self.stop_event.is_set()

    def stop(self, wait=False):
        """ signals the loop to stop. The thread is joined only when wait is True. """
        self.stop_event.set()
        thread = self.background_thread
        self.background_thread = None
        if wait and thread and thread is not threading.current_thread():
            thread.join()


class ConnectionReader(AsyncLoop):
    """
    Opens a connector and reads from it on a background thread.
    Connector events and DataReceivedEvent instances are posted to the sink.
    A connect that fails is posted as a ConnectorFailedEvent.

    :param connector: the connector to open and read
    :param sink: an event source that accepts fire(event) from any thread
    """

    def __init__(self, connector: Connector, sink, log=logger):
        super().__init__(log=log)
        self.connector = connector
        self.sink = sink
        connector.events.add(sink.fire)

    def startup(self):
        try:
            self.connector.connect()
        except ConnectorError as e:
            self.sink.fire(ConnectorFailedEvent(self.connector, e))
            raise

    def loop(self):
        data = self.connector.conduit.receive()
        if data:
            self.sink.fire(DataReceivedEvent(self.connector, data))

    def shutdown(self):
        self.connector.disconnect()

    def exception_handler(self, e):
        if not self.running():
            self.logger.debug("reader for %s stopped: %s" % (self.connector.endpoint, e))
        elif isinstance(e, (ConnectorError, ConduitClosedError)):
            self.logger.info("connection to %s ended: %s" % (self.connector.endpoint, e))
        else:
            super().exception_handler(e)
        self.stop_event.set()
