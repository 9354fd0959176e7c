class ByteLengthFramer:
    """
    Splits a byte stream into frames of a fixed length.
    Bytes that do not yet complete a frame are held until more data arrives.

    >>> framer = ByteLengthFramer(2)
    >>> framer.feed(b'abc')
    [b'ab']
    >>> framer.feed(b'd')
    [b'cd']
    """

    def __init__(self, length=1):
        if length < 1:
            raise ValueError("frame length must be at least 1, not %s" % length)
        self.length = length
        self._buffer = bytearray()

    def feed(self, data: bytes):
        """ adds data to the stream and returns the list of frames it completes. """
        self._buffer.extend(data)
        n = self.length
        count = len(self._buffer) // n
        frames = [bytes(self._buffer[i * n:(i + 1) * n]) for i in range(count)]
        del self._buffer[:count * n]
        return frames

    @property
    def pending(self):
        return bytes(self._buffer)

    def reset(self):
        self._buffer.clear()
