import unittest
from unittest.mock import Mock, call

from hamcrest import assert_that, is_, none

from relaybridge.bus import MessageLog, Stream, StreamBundle


class StreamTest(unittest.TestCase):

    def test_subscribe_and_unsubscribe(self):
        sut = Stream()
        handler = Mock()
        unsubscribe = sut.on_value(handler)
        sut.emit(1)
        unsubscribe()
        sut.emit(2)
        handler.assert_called_once_with(1)

    def test_map(self):
        sut = Stream()
        handler = Mock()
        sut.map(lambda v: v * 10).on_value(handler)
        sut.emit(2)
        handler.assert_called_once_with(20)

    def test_start_with(self):
        sut = Stream()
        handler = Mock()
        sut.start_with(0).on_value(handler)
        sut.emit(1)
        handler.assert_has_calls([call(0), call(1)])

    def test_skip_duplicates(self):
        sut = Stream()
        seen = []
        sut.skip_duplicates().on_value(seen.append)
        for v in [0, 0, 1, 1, 0]:
            sut.emit(v)
        assert_that(seen, is_([0, 1, 0]))

    def test_derived_unsubscribe_detaches_from_source(self):
        sut = Stream()
        handler = Mock()
        unsubscribe = sut.map(str).skip_duplicates().on_value(handler)
        unsubscribe()
        sut.emit(1)
        handler.assert_not_called()
        assert_that(sut._handlers.handlers(), is_(()))


class StreamBundleTest(unittest.TestCase):

    def test_get_self_stream(self):
        sut = StreamBundle()
        assert_that(sut.get_self_stream("a.b"), is_(none()))
        stream = sut.stream("a.b")
        assert_that(sut.get_self_stream("a.b"), is_(stream))
        assert_that(sut.stream("a.b"), is_(stream))
        assert_that(sut.paths(), is_(("a.b",)))


class MessageLogTest(unittest.TestCase):

    def test_values(self):
        sut = MessageLog()
        sut.handle_message("devantech", {"updates": [{"source": {"device": "devantech"},
                                                      "values": [{"path": "p", "value": 1}]}]})
        assert_that(sut.values(), is_([("p", 1)]))
