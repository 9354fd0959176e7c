"""
Loads plugin options from a configobj file, for running the bridge outside a host.

The file holds a `defaulttriggerpath` and a `[modules]` section. Each module is a subsection
whose name is the module id unless an `id` is given. Channels are subsections of the module's
`[[[channels]]]` section, and are kept in file order:

    defaulttriggerpath = control.relay.
    [modules]
        [[A]]
        cstring = usb:/dev/ttyACM0
        statuscommand = \\x5b
            [[[channels]]]
                [[[[1]]]]
                index = 0
                on = \\x65
                off = \\x6f
                statusmask = 1

The file is checked against a configspec for shape only. Completeness of each module and channel
is left to `validate_options`, which drops incomplete entries instead of failing.
"""
import os

from configobj import ConfigObj, ConfigObjError, Section
from configobj.validate import Validator

options_configspec = """
defaulttriggerpath = string(default='')
[modules]
    [[__many__]]
    id = string(default=None)
    cstring = string(default=None)
    description = string(default=None)
    statuscommand = string(default=None)
        [[[channels]]]
            [[[[__many__]]]]
            id = string(default=None)
            index = string(default=None)
            on = string(default=None)
            off = string(default=None)
            name = string(default=None)
            statusmask = string(default=None)
            trigger = string(default=None)
            statuscommand = string(default=None)
""".splitlines()


def load_config_file_base(file, must_exist=True, configspec=None):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, configspec=configspec, file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj(configspec=configspec)
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def section_entries(section: Section):
    """
    Converts the subsections of a section into a list of dictionaries, in file order.
    A subsection without an id takes the subsection name as id.
    """
    entries = []
    for name in section.sections:
        entry = dict(section[name])
        if entry.get('id') is None:
            entry['id'] = name
        entries.append(entry)
    return entries


def options_from_config(config: Section):
    """
    Converts a validated configuration into the options dictionary a host would supply.
    """
    section = config.get('modules')
    modules = section_entries(section) if isinstance(section, Section) else []
    for m in modules:
        channels = m.get('channels')
        m['channels'] = section_entries(channels) if isinstance(channels, Section) else []
    return {'defaulttriggerpath': config.get('defaulttriggerpath', ''), 'modules': modules}


def load_options(file):
    """
    Loads and shape checks an options file.
    :param file: the path of the file to load
    :return: the options as a dictionary, ready for validate_options
    :raises ConfigObjError: when the file cannot be parsed or fails the shape check
    """
    config = load_config_file_base(file, configspec=options_configspec)
    result = config.validate(Validator())
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (file, result))
    return options_from_config(config)
