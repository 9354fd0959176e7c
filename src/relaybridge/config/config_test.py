import os
import unittest
from unittest.mock import Mock

from configobj import ConfigObj, ConfigObjError
from hamcrest import assert_that, is_, calling, raises, has_entries, contains_exactly

from relaybridge.config.config import load_config_file_base, load_options, options_from_config
from relaybridge.config.options import validate_options

this_dir = os.path.dirname(__file__)


class ConfigTestCase(unittest.TestCase):

    def test_config_file_not_found(self):
        assert_that(calling(load_config_file_base).with_args('blah'), raises(IOError))

    def test_config_file_optional(self):
        config = load_config_file_base(os.path.join(this_dir, 'missing.cfg'), must_exist=False)
        assert_that(dict(config), is_({}))

    def test_config_file_invalid_syntax(self):
        assert_that(calling(load_options).with_args(os.path.join(this_dir, 'relays_test_invalid_syntax.cfg')),
                    raises(ConfigObjError, "at .*relays_test_invalid_syntax.cfg"))

    def test_load_options(self):
        options = load_options(os.path.join(this_dir, 'relays_test.cfg'))
        assert_that(options['defaulttriggerpath'], is_('control.relays.'))
        a, b = options['modules']
        assert_that(a, has_entries(id='A', cstring='usb:/dev/ttyACM0', statuscommand='\\x5b'))
        assert_that([c['id'] for c in a['channels']], contains_exactly('2', '1'))
        assert_that(a['channels'][0], has_entries(index='1', on='\\x66', name='Bilge pump', statusmask=None))
        assert_that(b, has_entries(id='B', cstring='tcp:192.168.1.20:17494', channels=[]))

    def test_loaded_options_validate(self):
        options = load_options(os.path.join(this_dir, 'relays_test.cfg'))
        result = validate_options(options, Mock())
        a = result.modules[0]
        assert_that(a.statuscommand, is_(b'\x5b'))
        assert_that([(c.id, c.on, c.statusmask) for c in a.channels],
                    is_([('2', b'\x66', 1), ('1', b'\x65', 1)]))

    def test_options_from_empty_config(self):
        assert_that(options_from_config(ConfigObj()), is_({'defaulttriggerpath': '', 'modules': []}))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
