#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""A minimal publish/subscribe channel."""

__version__ = '1.0'
__license__ = 'GPL-3.0'

from collections import defaultdict
from typing import Callable


class Events:
    """Named events with any number of handlers.

    Handlers run in subscription order. Errors raised by a handler
    propagate to the emitter.
    """

    def __init__(self):
        self._handlers = defaultdict(list)

    def on(self, event: str, handler: Callable) -> Callable:
        self._handlers[event].append(handler)
        return handler

    def off(self, event: str, handler: Callable) -> None:
        if handler in self._handlers.get(event, ()):
            self._handlers[event].remove(handler)

    def emit(self, event: str, *args, **kwargs) -> int:
        """Call every handler of ``event``.

        :return: how many handlers were called
        """
        handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            handler(*args, **kwargs)
        return len(handlers)

    def listeners(self, event: str) -> list:
        return list(self._handlers.get(event, ()))
