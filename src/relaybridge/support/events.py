from queue import Empty, Queue


class EventSource(object):
    """
    A list of handlers that are each called, in registration order, when an event is fired.
    """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def remove(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def handlers(self):
        return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        self._fire(*args, **kwargs)

    def fire_all(self, events):
        self._fire_all(events)

    def _fire_all(self, events):
        for e in events:
            self._fire(e)

    def _fire(self, *args, **kwargs):
        for handler in self._handlers:
            handler(*args, **kwargs)


class QueuedEventSource(EventSource):
    """
    The public fire() methods post events to the queue, from any thread. The queued events
    are delivered to the handlers only when a thread calls publish(), so all handlers run on
    the publishing thread, in the order the events were posted.
    """
    def __init__(self):
        super().__init__()
        self.event_queue = Queue()

    def fire(self, event):
        self.event_queue.put(event)

    def fire_all(self, events):
        for e in events:
            self.event_queue.put(e)

    def publish(self, timeout=None):
        """
        Publishes any queued events on the calling thread.
        :param timeout: when given, waits up to this many seconds for the first event to arrive.
        :return: the number of events published
        """
        queue = self.event_queue
        events = []
        if timeout is not None and queue.empty():
            try:
                events.append(queue.get(timeout=timeout))
            except Empty:
                return 0
        while not queue.empty():
            events.append(queue.get())
        self._fire_all(events)
        return len(events)
