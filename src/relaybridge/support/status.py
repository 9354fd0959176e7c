"""
Reports operational status and errors to the host, and to the log.

The host supplies two optional sinks: one for status notifications, one for errors. Messages
are prefixed with the plugin id before they reach the host, and are always logged.
"""
import logging

logger = logging.getLogger(__name__)


class StatusReporter:

    def __init__(self, plugin_id, set_status=None, set_error=None, log=logger):
        self.plugin_id = plugin_id
        self._set_status = set_status
        self._set_error = set_error
        self.logger = log

    def notify(self, message):
        self.logger.info(message)
        if self._set_status:
            self._set_status(self._decorate(message))

    def error(self, message):
        self.logger.error(message)
        if self._set_error:
            self._set_error(self._decorate(message))

    def _decorate(self, message):
        """
        >>> StatusReporter('devantech')._decorate('hello')
        'devantech: hello'
        """
        return "%s: %s" % (self.plugin_id, message)
