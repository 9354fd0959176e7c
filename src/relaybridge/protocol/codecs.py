"""
Encodes relay requests into each module's wire format, and decodes what the module sends back.

Two protocols are supported. Over TCP, commands are written as configured and the only response
understood is the literal text ``fail``. Over serial, a module reports all of its channel states
in a single status byte, one bit position per channel in declared channel order.
"""
from abc import abstractmethod

FAILURE_TOKEN = "fail"


class ProtocolCodec:
    """
    Knows how to convert logical relay requests to and from the on-wire data format of a module.
    """

    @abstractmethod
    def encode_toggle(self, module, channel, value):
        """ returns the sequence of byte strings that switch the channel to the logical value. """
        raise NotImplementedError()

    def encode_status_poll(self, module):
        """ returns the sequence of byte strings that ask the module for its state. """
        return [module.statuscommand] if module.statuscommand else []


class TcpAsciiCodec(ProtocolCodec):

    def encode_toggle(self, module, channel, value):
        commands = [channel.command(value)]
        if channel.statuscommand:
            commands.append(channel.statuscommand)
        return commands

    def is_failure(self, data: bytes):
        """
        >>> TcpAsciiCodec().is_failure(b'fail\\r\\n')
        True
        >>> TcpAsciiCodec().is_failure(b'ok')
        False
        """
        return data.decode('latin-1').strip() == FAILURE_TOKEN


class SerialBitmaskCodec(ProtocolCodec):

    frame_length = 1

    def encode_toggle(self, module, channel, value):
        return [channel.command(value)] + self.encode_status_poll(module)

    def decode_status(self, status, channels):
        """
        Decodes a status byte into one state per channel, in channel order.
        Channel n is read from bit position n, masked with the channel's statusmask.

        A status of 0 cannot be told apart from "no report" and is ignored, so a module with every
        channel off never reports that state.

        >>> class C: statusmask = 1
        >>> SerialBitmaskCodec().decode_status(0b101, [C(), C(), C()])
        [1, 0, 1]
        >>> SerialBitmaskCodec().decode_status(0, [C()]) is None
        True

        :return: the list of channel states, or None when there is nothing to report.
        """
        if not status:
            return None
        states = []
        for channel in channels:
            states.append(status & channel.statusmask)
            status >>= 1
        return states
