from ..constants import COMPRESSION, DEFAULT_DB_FILE, PairfqNamespace


DEFAULTS = PairfqNamespace()
"""
- :term:`in_memory`
- :term:`db_file`
- :term:`cache_size`
- :term:`compress`
- :term:`strict`
- :term:`strict_quality`
"""
DEFAULTS.add(
    'in_memory', False, env_overwritable=True,
    defn='hold the stored reads in memory instead of an on-disk database. This is faster but may use a large '
    'amount of RAM for inputs with many millions of reads')
DEFAULTS.add(
    'db_file', DEFAULT_DB_FILE, env_overwritable=True,
    defn='path to the on-disk database used to store reads. Any existing file is replaced and the file is '
    'removed when the task finishes')
DEFAULTS.add(
    'cache_size', 100000, env_overwritable=True,
    defn='maximum size (KiB) of the page cache of the on-disk database')
DEFAULTS.add(
    'compress', None, cast_type=COMPRESSION, nullable=True, env_overwritable=True,
    defn='compress the output files with gzip or bzip2')
DEFAULTS.add(
    'strict', False, env_overwritable=True,
    defn='raise an error for reads that are not written to any output (joinpairs reads without a mate, '
    'splitpairs reads that are neither forward nor reverse) instead of skipping them')
DEFAULTS.add(
    'strict_quality', False, env_overwritable=True,
    defn='raise an error if an input ends before the quality string of the last read is complete instead of '
    'keeping the partial read')
