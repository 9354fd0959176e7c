"""
Bridges logical switch state on the data bus to relay modules.

Outbound, each channel subscribes to its trigger stream; every new value is written to the module
as a switch command and published back as the channel state. Inbound, status reports decoded from a
module are published as the state of each of its channels.

All work happens on the thread that calls dispatch(). Stream values, connection events and
received data are first posted to one event queue, so they are handled one at a time in arrival
order. An event that fails is reported and does not hold up the events queued after it.
Connections are opened and read on their own background threads, which only post events.
"""
import logging

from relaybridge.connector.base import ConnectorConnectedEvent, ConnectorDisconnectedEvent, ConnectorFailedEvent
from relaybridge.model import Options
from relaybridge.protocol.reader import DataReceivedEvent
from relaybridge.registry import ChannelBinding, ChannelRegistry, make_delta
from relaybridge.support.events import QueuedEventSource
from relaybridge.transport import ModuleConfigurationError, transport_for

logger = logging.getLogger(__name__)

NOTIFICATION_PREFIX = "notifications."


class ChannelValueEvent:
    """ A channel's trigger stream produced a new value. """
    def __init__(self, binding: ChannelBinding, value):
        self.binding = binding
        self.value = value


def alert_state(notification):
    """
    >>> alert_state(None), alert_state({'state': 'normal'}), alert_state({'state': 'alarm'})
    (0, 0, 1)
    """
    return 0 if notification is None or notification.get('state') == 'normal' else 1


def stream_for_path(bundle, path):
    """
    Resolves the stream that drives a channel.
    Notification paths are turned into 1 while the notification is in an alert state, otherwise 0.
    :return: a deduplicated stream, or None when nothing publishes on the path
    """
    if not path:
        return None
    stream = bundle.get_self_stream(path)
    if stream is None:
        return None
    if path.startswith(NOTIFICATION_PREFIX):
        stream = stream.map(alert_state).start_with(0)
    return stream.skip_duplicates()


class StateBridge:
    """
    One activation of the bridge: created by start(), released by stop().

    :param options: the validated options
    :param bundle: the stream bundle that supplies trigger streams (get_self_stream)
    :param sink: the message sink that receives deltas (handle_message)
    :param status: the StatusReporter for operational messages
    :param plugin_id: the device identity used as the source of every delta
    """

    def __init__(self, options: Options, bundle, sink, status, plugin_id, transport_factory=transport_for):
        self.options = options
        self.bundle = bundle
        self.sink = sink
        self.status = status
        self.plugin_id = plugin_id
        self.transport_factory = transport_factory
        self.events = QueuedEventSource()
        self.events += self._handle_event
        self.registry = None
        self.transports = {}
        self.unsubscribes = []

    def start(self):
        registry = ChannelRegistry(Options(self.options.defaulttriggerpath))
        for module in self.options.modules:
            try:
                transport = self.transport_factory(module, self.status)
            except ModuleConfigurationError as e:
                self.status.error("ignoring module '%s' (%s)" % (module.id, e))
                continue
            registry.add_module(module)
            if transport is not None:
                self.transports[module.id] = transport
        self.registry = registry

        count = len(self.transports)
        self.status.notify("operating %d relay module%s" % (count, "" if count == 1 else "s"))

        self.publish(registry.meta_values())

        for binding in registry.bindings:
            if binding.module.id in self.transports:
                self._subscribe(binding)

        for transport in self.transports.values():
            transport.connect(self.events)

    def _subscribe(self, binding: ChannelBinding):
        path = self.registry.trigger_path(binding)
        stream = stream_for_path(self.bundle, path)
        if stream is None:
            logger.debug("no stream at %s for channel %s" % (path, binding.key))
            return
        self.unsubscribes.append(stream.on_value(lambda v: self.events.fire(ChannelValueEvent(binding, v))))

    def stop(self):
        unsubscribes, self.unsubscribes = self.unsubscribes, []
        for unsubscribe in unsubscribes:
            unsubscribe()
        transports, self.transports = self.transports, {}
        for transport in transports.values():
            transport.disconnect()

    def publish(self, values):
        if values:
            self.sink.handle_message(self.plugin_id, make_delta(self.plugin_id, values))

    def dispatch(self, timeout=None):
        """
        Handles the queued events on the calling thread.
        :param timeout: how long to wait for an event when none is queued
        :return: the number of events handled
        """
        return self.events.publish(timeout)

    def run(self, running=lambda: True, poll=0.1):
        """ dispatches events until running() returns False. """
        while running():
            self.dispatch(poll)

    def _handle_event(self, event):
        try:
            self._handle(event)
        except Exception as e:
            logger.exception(e)
            self.status.error("error handling %s (%s)" % (type(event).__name__, e))

    def _handle(self, event):
        if isinstance(event, ChannelValueEvent):
            self._channel_value(event.binding, event.value)
            return
        transport = self._transport_for_event(event)
        if transport is None:
            return
        if isinstance(event, ConnectorConnectedEvent):
            transport.on_connected()
        elif isinstance(event, ConnectorDisconnectedEvent):
            transport.on_disconnected()
        elif isinstance(event, ConnectorFailedEvent):
            transport.on_failed(event.error)
        elif isinstance(event, DataReceivedEvent):
            for states in transport.on_data(event.data):
                self.publish(self.registry.state_values(transport.module, states))

    def _transport_for_event(self, event):
        for transport in self.transports.values():
            if transport.handles(event):
                return transport
        return None

    def _channel_value(self, binding: ChannelBinding, value):
        transport = self.transports.get(binding.module.id)
        if transport is None:
            return
        if transport.connected:
            transport.send_toggle(binding.channel, value)
        else:
            logger.debug("module %s is not connected, %s=%s not written" % (binding.module.id, binding.key, value))
        # published whether or not the write was made
        self.publish([(binding.state_path, value)])
