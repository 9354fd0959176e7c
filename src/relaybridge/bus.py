"""
The host data bus, as seen by the bridge.

The host owns a bundle of value streams, one per data path, and accepts outbound deltas. The bridge
only needs a small part of that: look up a stream by path, derive a mapped, deduplicated stream from
it, subscribe, and hand deltas back. The in-memory classes here provide that for standalone runs
and tests; a host passes its own objects with the same methods.
"""
import logging

from relaybridge.support.events import EventSource

logger = logging.getLogger(__name__)


class Stream:
    """
    A push stream of values. Source streams receive values through emit(); derived streams
    (map, start_with, skip_duplicates) subscribe to their source when they are subscribed to.
    """

    def __init__(self, subscribe=None):
        self._handlers = EventSource()
        self._subscribe = subscribe or self._add_handler

    def _add_handler(self, handler):
        self._handlers.add(handler)
        return lambda: self._handlers.remove(handler)

    def emit(self, value):
        self._handlers.fire(value)

    def on_value(self, handler):
        """
        Subscribes the handler to the values of this stream.
        :return: a callable that unsubscribes the handler
        """
        return self._subscribe(handler)

    def map(self, fn):
        return Stream(lambda handler: self.on_value(lambda v: handler(fn(v))))

    def start_with(self, value):
        """ each subscriber receives the value on subscription, before any value from this stream. """
        def subscribe(handler):
            handler(value)
            return self.on_value(handler)
        return Stream(subscribe)

    def skip_duplicates(self):
        """ consecutive equal values are delivered once. """
        def subscribe(handler):
            last = []

            def distinct(v):
                if last and last[0] == v:
                    return
                last[:] = [v]
                handler(v)
            return self.on_value(distinct)
        return Stream(subscribe)


class StreamBundle:
    """ The streams of the local vessel, keyed by path. """

    def __init__(self):
        self._streams = {}

    def stream(self, path) -> Stream:
        """ fetches the stream for the path, creating it if needed. """
        if path not in self._streams:
            self._streams[path] = Stream()
        return self._streams[path]

    def get_self_stream(self, path):
        """
        :return: the stream for the path, or None when nothing publishes on that path
        """
        return self._streams.get(path)

    def paths(self):
        return tuple(self._streams)


class MessageLog:
    """ A message sink that keeps every delta it handles. """

    def __init__(self):
        self.messages = []

    def handle_message(self, source_id, delta):
        logger.debug("delta from %s: %s" % (source_id, delta))
        self.messages.append((source_id, delta))

    def values(self):
        """ all the path/value pairs handled so far, in order. """
        return [(v['path'], v['value'])
                for _, delta in self.messages for update in delta['updates'] for v in update['values']]
