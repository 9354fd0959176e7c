"""
Value types for the validated relay configuration.

A module is one physical relay unit reached over one connection. Its channels are kept in
declared order: on the serial protocol, the position of a channel in the list is the bit
position of its state in the module status byte, so reordering channels in the configuration
changes their meaning on the wire.
"""
from relaybridge.support.mixins import CommonEqualityMixin, StringerMixin

SWITCH_PATH_PREFIX = "electrical.switches."


class Channel(CommonEqualityMixin, StringerMixin):
    """ One relay contact within a module. """

    def __init__(self, id, index, on: bytes, off: bytes, name=None, statusmask=1, trigger=None,
                 statuscommand: bytes=None):
        self.id = id
        self.index = index
        self.on = on
        self.off = off
        self.name = name
        self.statusmask = statusmask
        self.trigger = trigger
        self.statuscommand = statuscommand

    def command(self, value) -> bytes:
        """ the command that switches this channel to the given logical state """
        return self.on if value == 1 else self.off


class Module(CommonEqualityMixin, StringerMixin):
    """ One relay unit and its channels. """

    def __init__(self, id, cstring, description=None, statuscommand: bytes=None, channels=None):
        self.id = id
        self.cstring = cstring
        self.description = description
        self.statuscommand = statuscommand
        self.channels = list(channels or [])

    @property
    def scheme(self):
        """
        >>> Module('A', 'usb:/dev/ttyACM0').scheme
        'usb'
        """
        return self.cstring.split(':', 1)[0]

    def channel_key(self, channel: Channel):
        """
        >>> Module('A', 'tcp:host:1').channel_key(Channel('1', 0, b'o', b'f'))
        'A.1'
        """
        return self.id + "." + channel.id


class Options(CommonEqualityMixin, StringerMixin):
    """ The validated plugin options. """

    def __init__(self, defaulttriggerpath="", modules=None):
        self.defaulttriggerpath = defaulttriggerpath
        self.modules = list(modules or [])


def switch_path(key, leaf):
    """
    >>> switch_path('A.1', 'state')
    'electrical.switches.A.1.state'
    """
    return SWITCH_PATH_PREFIX + key + "." + leaf
