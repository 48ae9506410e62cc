"""
module responsible for the constants and the namespace helper used throughout the pairfq package
"""
import argparse
import os


EXIT_OK = 0
EXIT_ERROR = 1
ENV_VAR_PREFIX = 'PAIRFQ_'


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


class PairfqNamespace:
    """
    controlled vocabulary and option defaults. Members are read as attributes and calling the
    namespace checks that a value is one of its members

    options added with env_overwritable set are read from the PAIRFQ_<NAME> environment variable
    (cast to the option type) whenever that variable is set

    Example:
        >>> COLOR = PairfqNamespace(RED='red', BLUE='blue')
        >>> COLOR.RED
        'red'
        >>> COLOR('blue')
        'blue'
    """

    def __init__(self, **kwargs):
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_nullable', set())
        object.__setattr__(self, '_env_overwritable', set())
        for attr, value in kwargs.items():
            self.add(attr, value)

    def __getattr__(self, attr):
        if attr.startswith('_') or attr not in self._members:
            raise AttributeError(attr)
        env_name = ENV_VAR_PREFIX + attr.upper()
        if attr not in self._env_overwritable or env_name not in os.environ:
            return self._members[attr]
        value = os.environ[env_name].strip()
        if attr in self._nullable and value.lower() in ['none', 'null', '']:
            return None
        return self._types[attr](value)

    def __setattr__(self, attr, value):
        raise AttributeError('use add to set a member of the namespace', attr)

    def __getitem__(self, attr):
        return getattr(self, attr)

    def __contains__(self, attr):
        return attr in self._members

    def keys(self):
        return list(self._members)

    def values(self):
        return [self[k] for k in self._members]

    def add(self, attr, value, defn=None, cast_type=None, nullable=False, env_overwritable=False):
        """
        Args:
            attr (str): name of the member
            value: the value (or the default value for options)
            defn (str): the definition, used as the help text of the matching command line option
            cast_type (callable): casts the environment variable value, defaults to the type of the value
            nullable (bool): the environment variable may set the option to None
            env_overwritable (bool): the option may be set from its environment variable
        """
        if cast_type is None:
            cast_type = type(value)
        self._types[attr] = cast_boolean if cast_type == bool else cast_type
        if defn:
            self._defns[attr] = defn
        if nullable:
            self._nullable.add(attr)
        if env_overwritable:
            self._env_overwritable.add(attr)
        self._members[attr] = value

    def define(self, attr):
        return self._defns.get(attr)

    def type(self, attr):
        return self._types[attr]

    def enforce(self, value):
        """
        Raises:
            KeyError: the value is not a member of the namespace
        """
        if value not in self.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), self.values())
        return value

    def __call__(self, value):
        try:
            return self.enforce(value)
        except KeyError:
            raise TypeError('Invalid value {} for {}. Must be a valid member: {}'.format(
                repr(value), self.__class__.__name__, self.values()))


def positive_int(num):
    """
    cast input to a positive integer

    Raises:
        argparse.ArgumentTypeError: if the input cannot be cast or is not greater than zero
    """
    try:
        num = int(num)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a positive integer')
    if num <= 0:
        raise argparse.ArgumentTypeError('Must be a positive integer')
    return num


SUBCOMMAND = PairfqNamespace(
    ADDINFO='addinfo',
    MAKEPAIRS='makepairs',
    JOINPAIRS='joinpairs',
    SPLITPAIRS='splitpairs',
)
"""
holds controlled vocabulary for the tasks pairfq can perform

- ``addinfo``: add the pair info back to the FastA/Q header
- ``makepairs``: pair the forward and reverse reads and write singletons for both to separate files
- ``joinpairs``: interleave the paired forward and reverse files
- ``splitpairs``: split an interleaved file into separate forward and reverse files
"""

COMPRESSION = PairfqNamespace(GZIP='gzip', BZIP2='bzip2')
"""
holds controlled vocabulary for the output compression modes

- ``gzip``: compress with gzip, adds the ``.gz`` extension
- ``bzip2``: compress with bzip2, adds the ``.bz2`` extension
"""

COMPRESSION_SUFFIX = {COMPRESSION.GZIP: '.gz', COMPRESSION.BZIP2: '.bz2'}

BACKEND = PairfqNamespace(MEMORY='memory', DISK='disk')
"""
holds controlled vocabulary for the sequence store backends

- ``memory``: python dictionary, fastest but holds one whole input in RAM
- ``disk``: sqlite b-tree file with a bounded page cache
"""

MARKER = PairfqNamespace(FASTA='>', FASTQ='@', QUALITY='+')
""":class:`PairfqNamespace`: first character of the fasta header, fastq header and fastq quality separator lines"""

HEADER_MARKERS = (MARKER.FASTA, MARKER.FASTQ)

PAIR_NUMBER = PairfqNamespace(FORWARD='1', REVERSE='2')

SEPARATOR = '\N{INVISIBLE SEPARATOR}'
""":class:`str`: joins two strings into a single store key or value. Never allowed in an input record"""

DEFAULT_DB_FILE = 'pairfq.bdb'
