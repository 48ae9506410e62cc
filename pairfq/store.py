"""
key-addressed storage for one side of a read set

one input is drained into a store (pair key -> sequence payload) while the other input is streamed
past it. Two interchangeable backends are provided. The in-memory store is a python dictionary. The
disk store is an sqlite database holding a single b-tree table ordered by the key bytes; it has a
bounded page cache so memory use does not grow with the size of the input.
"""
from contextlib import contextmanager
import os
import sqlite3

from .constants import BACKEND, DEFAULT_DB_FILE
from .util import DEVNULL, mkdirp


class SequenceStore:
    """
    base class (interface) for the sequence stores. Keys and values are bytes
    """

    def insert(self, key, value):
        raise NotImplementedError('abstract method')

    def get(self, key):
        """
        Returns:
            bytes: the stored value or None if the key is not in the store
        """
        raise NotImplementedError('abstract method')

    def remove(self, key):
        """
        Returns:
            bytes: the value that was removed or None if the key is not in the store
        """
        raise NotImplementedError('abstract method')

    def items(self):
        """
        Returns:
            Iterable[Tuple[bytes,bytes]]: the remaining key/value pairs
        """
        raise NotImplementedError('abstract method')

    def destroy(self):
        """
        release all resources held by the store. Safe to call more than once
        """
        raise NotImplementedError('abstract method')

    def __len__(self):
        raise NotImplementedError('abstract method')

    def __contains__(self, key):
        return self.get(key) is not None

    def __enter__(self):
        return self

    def __exit__(self, *pos):
        self.destroy()


class MemoryStore(SequenceStore):

    def __init__(self):
        self._content = {}

    def insert(self, key, value):
        self._content[key] = value

    def get(self, key):
        return self._content.get(key)

    def remove(self, key):
        return self._content.pop(key, None)

    def items(self):
        return iter(self._content.items())

    def destroy(self):
        self._content = {}

    def __len__(self):
        return len(self._content)


class DiskStore(SequenceStore):
    """
    sqlite backed store. The database file is deleted when the store is destroyed
    """
    COMMIT_EVERY = 100000
    FETCH_SIZE = 1000

    def __init__(self, db_file=DEFAULT_DB_FILE, cache_size=100000, log=DEVNULL):
        """
        Args:
            db_file (str): path to the database file. Any existing file is removed first
            cache_size (int): maximum size of the page cache in KiB
        """
        self.db_file = db_file
        self.log = log
        self._pending = 0
        self._conn = None
        if os.path.dirname(db_file):
            mkdirp(os.path.dirname(db_file))
        self._remove_files()
        log('creating the sequence database:', db_file)
        try:
            self._conn = sqlite3.connect(db_file)
            self._conn.execute('PRAGMA cache_size=-{}'.format(int(cache_size)))
            self._conn.execute('PRAGMA journal_mode=MEMORY')
            self._conn.execute('PRAGMA synchronous=OFF')
            self._conn.execute('PRAGMA temp_store=MEMORY')
            self._conn.execute(
                'CREATE TABLE sequences (key BLOB PRIMARY KEY NOT NULL, value BLOB NOT NULL) WITHOUT ROWID'
            )
            self._conn.commit()
        except sqlite3.Error:
            self.destroy()
            raise

    def _remove_files(self):
        for filename in [self.db_file, self.db_file + '-journal']:
            if os.path.exists(filename):
                os.remove(filename)

    def _count_write(self):
        self._pending += 1
        if self._pending >= self.COMMIT_EVERY:
            self._conn.commit()
            self._pending = 0

    def insert(self, key, value):
        self._conn.execute('INSERT OR REPLACE INTO sequences (key, value) VALUES (?, ?)', (key, value))
        self._count_write()

    def get(self, key):
        row = self._conn.execute('SELECT value FROM sequences WHERE key = ?', (key, )).fetchone()
        if row is None:
            return None
        return bytes(row[0])

    def remove(self, key):
        value = self.get(key)
        if value is not None:
            self._conn.execute('DELETE FROM sequences WHERE key = ?', (key, ))
            self._count_write()
        return value

    def items(self):
        cursor = self._conn.execute('SELECT key, value FROM sequences ORDER BY key')
        while True:
            rows = cursor.fetchmany(self.FETCH_SIZE)
            if not rows:
                break
            for key, value in rows:
                yield bytes(key), bytes(value)

    def destroy(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self.log('removing the sequence database:', self.db_file)
        self._remove_files()

    def __len__(self):
        return self._conn.execute('SELECT COUNT(*) FROM sequences').fetchone()[0]


@contextmanager
def open_store(backend=BACKEND.DISK, db_file=DEFAULT_DB_FILE, cache_size=100000, log=DEVNULL):
    """
    create a sequence store which is always destroyed (the database file removed) on leaving the
    context, including when an error or keyboard interrupt is raised

    Args:
        backend (BACKEND): the type of store to create

    Example:
        >>> with open_store(BACKEND.MEMORY) as store:
        ...     store.insert(b'r1', b'ACGT')
    """
    BACKEND.enforce(backend)
    if backend == BACKEND.MEMORY:
        store = MemoryStore()
    else:
        store = DiskStore(db_file, cache_size=cache_size, log=log)
    try:
        yield store
    finally:
        store.destroy()
