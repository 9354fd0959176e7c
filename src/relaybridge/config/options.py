"""
Filters raw plugin options down to the modules and channels that are complete enough to operate.

Incomplete entries are reported and dropped; validation never fails as a whole. A module
missing a required property is dropped together with its channels. A channel missing a
required property is dropped on its own, leaving its siblings in place.
"""
import codecs
import logging

from relaybridge.model import Channel, Module, Options

logger = logging.getLogger(__name__)

MODULE_FIELDS = ('id', 'cstring', 'description', 'statuscommand')
MODULE_REQUIRED = ('id', 'cstring')
CHANNEL_FIELDS = ('id', 'index', 'on', 'off', 'name', 'statusmask', 'trigger', 'statuscommand')
CHANNEL_REQUIRED = ('id', 'index', 'on', 'off')


def normalize(value):
    """
    Trims strings. Blank strings and empty sequences become None. Other values pass unchanged.
    >>> normalize('  abc ')
    'abc'
    >>> normalize('   ') is None
    True
    >>> normalize(0)
    0
    >>> normalize([]) is None
    True
    """
    if isinstance(value, str):
        value = value.strip()
    if isinstance(value, (str, bytes, bytearray, list, tuple)) and not value:
        return None
    return value


def to_bytes(value):
    """
    Converts a configured command to the bytes written to the device.
    Strings may use python escape sequences for non-printable bytes.
    >>> to_bytes('\\\\x65')
    b'e'
    >>> to_bytes([1, 255])
    b'\\x01\\xff'
    >>> to_bytes('on')
    b'on'
    >>> to_bytes(None) is None
    True
    """
    if value is None or isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, list, tuple)):
        return bytes(value)
    if isinstance(value, int):
        return bytes([value])
    return codecs.decode(str(value), 'unicode_escape').encode('latin-1')


def to_mask(value, default=1):
    """
    >>> to_mask('0x04')
    4
    >>> to_mask(None)
    1
    >>> to_mask(2)
    2
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    return int(str(value), 0)


def _normalized(entry, fields):
    return {k: normalize(entry.get(k)) for k in fields}


def _missing(values, required):
    return [k for k in required if values[k] is None]


def validate_channel(raw, status):
    """
    :return: the channel, or None when the channel is incomplete or malformed.
    """
    c = _normalized(raw, CHANNEL_FIELDS)
    missing = _missing(c, CHANNEL_REQUIRED)
    for k in missing:
        status.error("ignoring channel '%s' (missing '%s' property)" % (c['id'], k))
    if missing:
        return None
    try:
        return Channel(str(c['id']), c['index'], to_bytes(c['on']), to_bytes(c['off']),
                       name=c['name'], statusmask=to_mask(c['statusmask']), trigger=c['trigger'],
                       statuscommand=to_bytes(c['statuscommand']))
    except (ValueError, UnicodeError) as e:
        status.error("ignoring channel '%s' (%s)" % (c['id'], e))
        return None


def validate_module(raw, status):
    """
    :return: the module with its valid channels, or None when the module is incomplete or malformed.
    """
    m = _normalized(raw, MODULE_FIELDS)
    missing = _missing(m, MODULE_REQUIRED)
    for k in missing:
        status.error("ignoring module '%s' (missing '%s' property)" % (m['id'], k))
    if missing:
        return None
    try:
        statuscommand = to_bytes(m['statuscommand'])
    except (ValueError, UnicodeError) as e:
        status.error("ignoring module '%s' (%s)" % (m['id'], e))
        return None
    channels = [c for c in (validate_channel(rc, status) for rc in (raw.get('channels') or [])) if c]
    return Module(str(m['id']), m['cstring'], m['description'], statuscommand, channels)


def validate_options(options, status) -> Options:
    """
    Validates the raw options dictionary received from the host.
    :param options: dict with 'defaulttriggerpath' and a list of 'modules'
    :param status: the StatusReporter that receives one error per dropped entry
    """
    options = options or {}
    modules = [m for m in (validate_module(rm, status) for rm in (options.get('modules') or [])) if m]
    logger.debug("validated %d module(s)" % len(modules))
    return Options(normalize(options.get('defaulttriggerpath')) or "", modules)
