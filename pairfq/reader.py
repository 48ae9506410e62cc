"""
streaming fasta/fastq parser

records are read one at a time. The header line of the next record is only recognized
once the previous record has been consumed so a single line of lookahead is kept between
calls. Sequence and quality may be wrapped over any number of lines; the end of the
quality block is found by length (it ends once it is at least as long as the sequence)
so quality lines beginning with '@' or '>' are read correctly.
"""
import logging

from .constants import HEADER_MARKERS, MARKER
from .error import TruncatedRecordError
from .record import SequenceRecord
from .util import LOG, open_input


def parse_header(line):
    """
    split a header line into the name and the comment

    Returns:
        Tuple[str,str]: the name and comment (None if there is no second token)

    Example:
        >>> parse_header('@r1 1:N:0:ACGT extra')
        ('r1', '1:N:0:ACGT')
        >>> parse_header('>r1/1')
        ('r1/1', None)
    """
    tokens = line[1:].split(None, 2)
    if not tokens:
        return '', None
    if len(tokens) == 1:
        return tokens[0], None
    return tokens[0], tokens[1]


class FastxReader:
    """
    iterates over the records of an open fasta or fastq handle

    Example:
        >>> with open('reads.fq') as fh:
        ...     for record in FastxReader(fh):
        ...         print(record.name)
    """

    def __init__(self, handle, strict_quality=False, source=None):
        """
        Args:
            handle: any iterable of text lines (ex. an open file)
            strict_quality (bool): raise an error if the input ends inside a quality block instead of
                returning the partial record
            source (str): name of the input used in error and log messages
        """
        self._lines = iter(handle)
        self._header = None  # the next unconsumed header line
        self._exhausted = False
        self.strict_quality = strict_quality
        self.source = source if source is not None else getattr(handle, 'name', '<stream>')

    def _readline(self):
        line = next(self._lines, None)
        if line is None:
            return None
        return line.rstrip('\r\n')

    def _find_header(self):
        while True:
            line = self._readline()
            if line is None:
                return None
            if line[:1] in HEADER_MARKERS:
                return line

    def next_record(self):
        """
        Returns:
            SequenceRecord: the next record or None when the input has been consumed

        Raises:
            TruncatedRecordError: strict_quality is set and the input ended in the middle of a quality block
            InvalidRecordError: the record contains the reserved separator character
        """
        if self._exhausted:
            return None
        if self._header is None:
            self._header = self._find_header()
            if self._header is None:
                self._exhausted = True
                return None

        name, comment = parse_header(self._header)
        self._header = None
        seq_lines = []
        line = self._readline()
        while line is not None and line[:1] not in (MARKER.FASTA, MARKER.FASTQ, MARKER.QUALITY):
            seq_lines.append(line)
            line = self._readline()
        sequence = ''.join(seq_lines)

        if line is None:
            self._exhausted = True
            return SequenceRecord(name, sequence, comment=comment).validate()
        elif line[:1] != MARKER.QUALITY:
            self._header = line
            return SequenceRecord(name, sequence, comment=comment).validate()

        qual_lines = []
        qual_length = 0
        while qual_length < len(sequence) or not qual_lines:
            line = self._readline()
            if line is None:
                self._exhausted = True
                if qual_length >= len(sequence):
                    break
                if self.strict_quality:
                    raise TruncatedRecordError(
                        'the input ended before the quality string reached the length of the sequence',
                        self.source, name, len(sequence), qual_length
                    )
                LOG(
                    'warning: {} ended inside the quality block of {} ({} of {} quality values)'.format(
                        self.source, name, qual_length, len(sequence)),
                    level=logging.WARNING
                )
                break
            qual_lines.append(line)
            qual_length += len(line)
        return SequenceRecord(name, sequence, quality=''.join(qual_lines), comment=comment).validate()

    def __iter__(self):
        return self

    def __next__(self):
        record = self.next_record()
        if record is None:
            raise StopIteration
        return record


def read_records(filename, strict_quality=False):
    """
    open an input file (see :func:`~pairfq.util.open_input`) and yield its records
    """
    with open_input(filename) as fh:
        for record in FastxReader(fh, strict_quality=strict_quality, source=filename):
            yield record
