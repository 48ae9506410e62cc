"""
sequence records, pair keys and the text form of both
"""
import re
import string

from .constants import MARKER, PAIR_NUMBER, SEPARATOR
from .error import InvalidRecordError, UnrecognizedHeaderError

SLASH_PAIR_PATTERN = re.compile(r'^(?P<key>.*)/(?P<pair>[12])$')


class SequenceRecord:
    """
    a single fasta or fastq record
    """
    __slots__ = ['name', 'comment', 'sequence', 'quality']

    def __init__(self, name, sequence, quality=None, comment=None):
        """
        Args:
            name (str): the first token of the header line (no marker)
            sequence (str): the sequence with the line breaks removed
            quality (str): the quality string, None for fasta records
            comment (str): the second token of the header line, None if the header has a single token
        """
        self.name = name
        self.comment = comment
        self.sequence = sequence
        self.quality = quality

    @property
    def is_fastq(self):
        return self.quality is not None

    @property
    def header(self):
        if self.comment is None:
            return self.name
        return '{} {}'.format(self.name, self.comment)

    def validate(self):
        """
        Raises:
            InvalidRecordError: if the reserved separator is found in any part of the record
        """
        for field in self.__slots__:
            value = getattr(self, field)
            if value is not None and SEPARATOR in value:
                raise InvalidRecordError(
                    'record contains the reserved separator character (U+2063) in the {}'.format(field), self.name
                )
        return self

    def to_string(self, header=None):
        """
        Returns:
            str: the record as fasta or fastq text. The sequence and quality are written on a single line each
        """
        if header is None:
            header = self.header
        if self.is_fastq:
            return '{}{}\n{}\n{}\n{}\n'.format(MARKER.FASTQ, header, self.sequence, MARKER.QUALITY, self.quality)
        return '{}{}\n{}\n'.format(MARKER.FASTA, header, self.sequence)

    def __eq__(self, other):
        if not isinstance(other, SequenceRecord):
            return NotImplemented
        return all([getattr(self, f) == getattr(other, f) for f in self.__slots__])

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__, ', '.join(['{}={}'.format(f, repr(getattr(self, f))) for f in self.__slots__])
        )


class PairKey:
    """
    the normalized name shared by the two mates of a fragment

    Attributes:
        name (str): the read name with the pair information removed
        comment (str): for illumina 1.8+ style headers, the comment with the leading pair digit removed. None otherwise
        pair (str): the pair number stripped from the header
    """
    __slots__ = ['name', 'comment', 'pair']

    def __init__(self, name, comment=None, pair=None):
        self.name = name
        self.comment = comment
        self.pair = pair

    @property
    def is_composite(self):
        return self.comment is not None

    def encode(self):
        """
        Returns:
            bytes: the key as it is stored in the sequence store

        Example:
            >>> PairKey('r1', ':N:0').encode() == 'r1\\u2063:N:0'.encode('utf8')
            True
        """
        if self.is_composite:
            return SEPARATOR.join([self.name, self.comment]).encode('utf8')
        return self.name.encode('utf8')

    @classmethod
    def decode(cls, key):
        """
        rebuild a key from its stored bytes. The pair number is not stored
        """
        text = key.decode('utf8')
        if SEPARATOR in text:
            name, comment = text.split(SEPARATOR, 1)
            return cls(name, comment)
        return cls(text)

    def header(self, pair):
        """
        regenerate the header for a given mate

        Args:
            pair (str): the pair number, 1 or 2

        Example:
            >>> PairKey('r1').header('1')
            'r1/1'
            >>> PairKey('r1', ':N:0:ACGT').header('2')
            'r1 2:N:0:ACGT'
        """
        name, comment = self.fields(pair)
        if comment is None:
            return name
        return '{} {}'.format(name, comment)

    def fields(self, pair):
        """
        Returns:
            Tuple[str,str]: the name and comment of the header for the given mate
        """
        if self.is_composite:
            return self.name, '{}{}'.format(pair, self.comment)
        return '{}/{}'.format(self.name, pair), None

    def __eq__(self, other):
        if not isinstance(other, PairKey):
            return NotImplemented
        return self.encode() == other.encode()

    def __hash__(self):
        return hash(self.encode())

    def __repr__(self):
        return 'PairKey(name={}, comment={}, pair={})'.format(repr(self.name), repr(self.comment), repr(self.pair))


def normalize(name, comment=None):
    """
    strip the pair information from a header

    a trailing /1 or /2 on the name takes precedence over the comment. Otherwise the first
    character of the comment must be the pair number (casava 1.8+ style, ex. 'r1 1:N:0:ACGT')

    Args:
        name (str): the read name
        comment (str): the header comment, if any

    Returns:
        PairKey: the normalized key

    Raises:
        UnrecognizedHeaderError: neither form of pair information was found

    Example:
        >>> normalize('r1/1')
        PairKey(name='r1', comment=None, pair='1')
        >>> normalize('r1', '2:N:0:ACGT')
        PairKey(name='r1', comment=':N:0:ACGT', pair='2')
    """
    match = SLASH_PAIR_PATTERN.match(name)
    if match:
        return PairKey(match.group('key'), pair=match.group('pair'))
    if comment and comment[0] in string.digits:
        return PairKey(name, comment[1:], pair=comment[0])
    raise UnrecognizedHeaderError(
        'Could not determine the pair information from the header. Expected a name ending in /1 or /2 or a '
        'comment starting with the pair number', name if comment is None else '{} {}'.format(name, comment)
    )


def encode_value(record):
    """
    Returns:
        bytes: the sequence (and the quality if given) as they are stored in the sequence store
    """
    if record.is_fastq:
        return SEPARATOR.join([record.sequence, record.quality]).encode('utf8')
    return record.sequence.encode('utf8')


def decode_value(value):
    """
    Returns:
        Tuple[str,str]: the sequence and quality (None for fasta)
    """
    text = value.decode('utf8')
    if SEPARATOR in text:
        sequence, quality = text.split(SEPARATOR, 1)
        return sequence, quality
    return text, None


def mate_record(key, value, pair):
    """
    rebuild a mate from its stored payload

    Args:
        key (PairKey): the key the payload was stored under
        value (bytes): the stored payload
        pair (str): the pair number of the mate

    Returns:
        SequenceRecord: the mate with its regenerated header
    """
    sequence, quality = decode_value(value)
    name, comment = key.fields(pair)
    return SequenceRecord(name, sequence, quality=quality, comment=comment)


def format_pair_record(record, key, pair=PAIR_NUMBER.FORWARD):
    """
    Returns:
        str: the record as text using the header regenerated from the pair key
    """
    return record.to_string(header=key.header(pair))
