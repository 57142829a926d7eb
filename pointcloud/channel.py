"""
Single-slot handoff between the acquisition loop and the render thread.

Only the most recent item matters: sending into a full slot discards the
unconsumed item instead of queueing behind it.
"""

import queue
import threading


class ChannelClosed(Exception):
    """Raised by send() once either side has closed the channel."""


class LatestValueChannel:
    def __init__(self):
        self._slot = queue.Queue(maxsize=1)
        self._closed = threading.Event()
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self):
        self._closed.set()

    def send(self, item):
        """Store ``item``, replacing any unconsumed one. Never blocks."""
        if item is None:
            raise ValueError("cannot send None")
        if self.closed:
            raise ChannelClosed("channel is closed")
        while True:
            try:
                self._slot.put_nowait(item)
                return
            except queue.Full:
                # 丢弃旧帧
                try:
                    self._slot.get_nowait()
                    self.dropped += 1
                except queue.Empty:
                    pass

    def try_receive(self):
        """Latest item, or None if nothing new arrived. Never blocks."""
        try:
            return self._slot.get_nowait()
        except queue.Empty:
            return None


class FrameSender:
    """Producer end. The acquisition loop holds only this."""

    def __init__(self, channel: LatestValueChannel):
        self._channel = channel

    def send(self, item):
        self._channel.send(item)

    def close(self):
        self._channel.close()

    @property
    def closed(self) -> bool:
        return self._channel.closed


class FrameReceiver:
    """Consumer end. The render thread holds only this."""

    def __init__(self, channel: LatestValueChannel):
        self._channel = channel

    def try_receive(self):
        return self._channel.try_receive()

    def close(self):
        self._channel.close()

    @property
    def closed(self) -> bool:
        return self._channel.closed


def open_channel():
    """Create a latest-value channel and return its (sender, receiver) ends."""
    channel = LatestValueChannel()
    return FrameSender(channel), FrameReceiver(channel)
