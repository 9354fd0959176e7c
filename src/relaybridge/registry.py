import logging

from relaybridge.model import Channel, Module, Options, switch_path

logger = logging.getLogger(__name__)

CHANNEL_TYPE = "relay"


def make_delta(source_id, values):
    """
    Builds a delta that updates the given path/value pairs.
    >>> make_delta('devantech', [('p', 1)])
    {'updates': [{'source': {'device': 'devantech'}, 'values': [{'path': 'p', 'value': 1}]}]}
    """
    return {"updates": [{"source": {"device": source_id},
                         "values": [{"path": path, "value": value} for path, value in values]}]}


class ChannelBinding:
    """ A channel, the module it belongs to and the key that addresses it on the data bus. """

    def __init__(self, module: Module, channel: Channel):
        self.module = module
        self.channel = channel
        self.key = module.channel_key(channel)

    @property
    def state_path(self):
        return switch_path(self.key, "state")

    @property
    def meta_path(self):
        return switch_path(self.key, "meta")

    def trigger_path(self, default_prefix):
        """
        The path of the stream that drives this channel: the channel trigger when given,
        otherwise the key under the default trigger prefix.
        """
        if self.channel.trigger:
            return self.channel.trigger
        if default_prefix and not default_prefix.endswith("."):
            default_prefix += "."
        return default_prefix + self.key


class ChannelRegistry:
    """
    The channels of the registered modules, in module then channel order.
    """

    def __init__(self, options: Options):
        self.default_trigger_path = options.defaulttriggerpath
        self.modules = []
        self.bindings = []
        self._by_key = {}
        for module in options.modules:
            self.add_module(module)

    def add_module(self, module: Module):
        self.modules.append(module)
        for channel in module.channels:
            binding = ChannelBinding(module, channel)
            if binding.key in self._by_key:
                logger.warning("channel key %s is used more than once" % binding.key)
            self._by_key[binding.key] = binding
            self.bindings.append(binding)

    def bindings_for(self, module: Module):
        return [b for b in self.bindings if b.module is module]

    def binding(self, key) -> ChannelBinding:
        return self._by_key[key]

    def keys(self):
        return [b.key for b in self.bindings]

    def trigger_path(self, binding: ChannelBinding):
        return binding.trigger_path(self.default_trigger_path)

    def meta_values(self):
        return [(b.meta_path, {"type": CHANNEL_TYPE, "name": b.channel.name}) for b in self.bindings]

    def state_values(self, module: Module, states):
        """ pairs each channel of the module, in declared order, with its state. """
        return [(b.state_path, state) for b, state in zip(self.bindings_for(module), states)]
