"""Identifier generators injected into the designer and the storage services"""

import itertools
import random
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits


class TimestampIdGenerator:
    """Builds ``<prefix>-<epoch ms>`` ids, optionally with a random base36 suffix.

    Two ids requested within the same millisecond collide when no suffix is
    used; callers that need stronger uniqueness should ask for a suffix.
    """

    def __init__(self, suffix_length: int = 0):
        self.suffix_length = suffix_length

    def new_id(self, prefix: str) -> str:
        value = f"{prefix}-{int(time.time() * 1000)}"
        if self.suffix_length:
            suffix = "".join(random.choices(_ALPHABET, k=self.suffix_length))
            value = f"{value}-{suffix}"
        return value


class SequentialIdGenerator:
    """Deterministic ``<prefix>-<n>`` ids, used by tests and fixtures."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


# Field ids carry a random suffix, form and submission ids do not
default_field_id_generator = TimestampIdGenerator(suffix_length=5)
default_record_id_generator = TimestampIdGenerator()
