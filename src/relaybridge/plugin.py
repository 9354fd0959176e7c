"""
The host-facing plugin: lifecycle, options schema, and a standalone runner.

A host constructs Plugin(app), where app provides:

- ``streambundle`` with ``get_self_stream(path)``
- ``handle_message(plugin_id, delta)``
- ``set_provider_status(message)`` and ``set_provider_error(message)``

and then calls start(options) and stop(). Between the two, a background dispatcher thread handles
all bridge events.
"""
import logging
import sys

from relaybridge.bridge import StateBridge
from relaybridge.bus import MessageLog, StreamBundle
from relaybridge.config.config import load_options
from relaybridge.config.options import validate_options
from relaybridge.protocol.reader import AsyncLoop
from relaybridge.support.status import StatusReporter

logger = logging.getLogger(__name__)

PLUGIN_ID = "devantech"
dispatch_poll = 0.1

PLUGIN_SCHEMA = {
    "type": "object",
    "properties": {
        "defaulttriggerpath": {"type": "string", "title": "Default trigger path", "default": "control.relays."},
        "modules": {
            "type": "array",
            "title": "Relay modules",
            "items": {
                "type": "object",
                "required": ["id", "cstring"],
                "properties": {
                    "id": {"type": "string", "title": "Module id"},
                    "cstring": {"type": "string", "title": "Connection string (tcp:host:port or usb:path)"},
                    "description": {"type": "string", "title": "Description"},
                    "statuscommand": {"type": "string", "title": "Status command"},
                    "channels": {
                        "type": "array",
                        "title": "Channels",
                        "items": {
                            "type": "object",
                            "required": ["id", "index", "on", "off"],
                            "properties": {
                                "id": {"type": "string", "title": "Channel id"},
                                "index": {"type": "string", "title": "Channel index"},
                                "on": {"type": "string", "title": "ON command"},
                                "off": {"type": "string", "title": "OFF command"},
                                "name": {"type": "string", "title": "Name"},
                                "statusmask": {"type": "string", "title": "Status mask"},
                                "trigger": {"type": "string", "title": "Trigger path"},
                                "statuscommand": {"type": "string", "title": "Status command"},
                            }
                        }
                    }
                }
            }
        }
    }
}


class Plugin:

    id = PLUGIN_ID
    name = "Devantech relay module plugin"
    description = "Signal K interface to Devantech relay modules"

    def __init__(self, app):
        self.app = app
        self.status = StatusReporter(self.id, getattr(app, 'set_provider_status', None),
                                     getattr(app, 'set_provider_error', None))
        self.bridge = None
        self.dispatcher = None

    def schema(self):
        return PLUGIN_SCHEMA

    def start(self, options):
        logger.debug("starting with options %s" % options)
        if self.bridge is not None:
            self.stop()
        validated = validate_options(options, self.status)
        self.bridge = StateBridge(validated, self.app.streambundle, self.app, self.status, self.id)
        self.bridge.start()
        self.dispatcher = AsyncLoop(self.bridge.dispatch, (dispatch_poll,))
        self.dispatcher.start()

    def stop(self):
        dispatcher, self.dispatcher = self.dispatcher, None
        if dispatcher is not None:
            dispatcher.stop(wait=True)
        bridge, self.bridge = self.bridge, None
        if bridge is not None:
            bridge.stop()


class LocalApp:
    """ A host made of the in-memory bus, for running the bridge on its own. """

    def __init__(self):
        self.streambundle = StreamBundle()
        self.messages = MessageLog()

    def handle_message(self, source_id, delta):
        self.messages.handle_message(source_id, delta)
        for update in delta['updates']:
            for v in update['values']:
                logger.info("%s = %s" % (v['path'], v['value']))


def run(config_file):
    """ runs the bridge from an options file until interrupted. """
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    app = LocalApp()
    status = StatusReporter(PLUGIN_ID)
    bridge = StateBridge(validate_options(load_options(config_file), status), app.streambundle, app, status,
                         PLUGIN_ID)
    bridge.start()
    try:
        bridge.run()
    except KeyboardInterrupt:
        pass
    finally:
        bridge.stop()


if __name__ == '__main__':  # pragma: no cover
    run(sys.argv[1])
