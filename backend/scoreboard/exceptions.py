"""Scoreboard exceptions.

Invalid score mutations (locked board, unknown lane, bound reached) are not
exceptions: the state methods return False for those. The classes here cover
the persistence path, where failures are logged and recovered locally.
"""


class ScoreboardException(Exception):
    """Base class for all scoreboard errors"""
    pass


class StorageError(ScoreboardException):
    """The key-value store could not be used"""

    def __init__(self, key, message):
        self.key = key
        super().__init__(f"{message} (key={key})")


class StorageReadError(StorageError):
    """Persisted record is unreadable, malformed or fails validation"""
    pass


class StorageWriteError(StorageError):
    """Persisted record could not be written"""
    pass
