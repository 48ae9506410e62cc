from contextlib import ExitStack

from .constants import DEFAULTS
from ..constants import BACKEND, PAIR_NUMBER
from ..error import PairNumberError, UnmatchedRecordError
from ..reader import read_records
from ..record import PairKey, encode_value, format_pair_record, mate_record, normalize
from ..store import open_store
from ..util import check_compression, compress_files, LOG, open_output


class PairCounts:
    """
    read counts for a single run. These are reported to the user and never used to make decisions
    """
    FIELDS = [
        'forward', 'reverse', 'forward_paired', 'reverse_paired', 'forward_singleton', 'reverse_singleton', 'dropped'
    ]

    def __init__(self, **kwargs):
        for field in self.FIELDS:
            setattr(self, field, kwargs.pop(field, 0))
        if kwargs:
            raise TypeError('unexpected count(s)', list(kwargs.keys()))

    @property
    def paired(self):
        return self.forward_paired + self.reverse_paired

    @property
    def singleton(self):
        return self.forward_singleton + self.reverse_singleton

    def to_dict(self):
        return {field: getattr(self, field) for field in self.FIELDS}

    def __eq__(self, other):
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'PairCounts({})'.format(', '.join(['{}={}'.format(k, v) for k, v in self.to_dict().items()]))


def pair_suffix(pairnum):
    """
    Returns:
        str: the pair number as a string

    Raises:
        PairNumberError: the pair number is not 1 or 2
    """
    pairnum = str(pairnum)
    if pairnum not in PAIR_NUMBER.values():
        raise PairNumberError('{} is not correct. Must be 1 or 2'.format(pairnum))
    return pairnum


def store_reads(filename, store, strict_quality=DEFAULTS.strict_quality):
    """
    drain an input file into the store, keyed by the normalized read name

    Returns:
        int: the number of reads read from the file
    """
    count = 0
    LOG('loading reads from:', filename, time_stamp=True)
    for record in read_records(filename, strict_quality=strict_quality):
        count += 1
        key = normalize(record.name, record.comment)
        store.insert(key.encode(), encode_value(record))
    LOG('loaded {} reads'.format(count))
    return count


def add_pair_info(
    pairnum, infile, outfile,
    compress=DEFAULTS.compress,
    strict_quality=DEFAULTS.strict_quality,
    **kwargs
):
    """
    add the pair information (/1 or /2) to every read name

    Args:
        pairnum (int): the pair number to add to the names, 1 or 2
        infile (str): path to the input fasta/q file
        outfile (str): path to the output file

    Returns:
        PairCounts: the number of reads written (as forward or reverse)
    """
    pair = pair_suffix(pairnum)
    check_compression(compress)
    count = 0
    with open_output(outfile) as out:
        for record in read_records(infile, strict_quality=strict_quality):
            count += 1
            out.write(record.to_string(header='{}/{}'.format(record.name, pair)))
    compress_files(compress, outfile, log=LOG)
    LOG('Total reads in {}: {}'.format(outfile, count))
    if pair == PAIR_NUMBER.FORWARD:
        return PairCounts(forward=count)
    return PairCounts(reverse=count)


def make_pairs_and_singles(
    forward, reverse, forw_paired, rev_paired, forw_unpaired, rev_unpaired,
    in_memory=DEFAULTS.in_memory,
    compress=DEFAULTS.compress,
    db_file=DEFAULTS.db_file,
    cache_size=DEFAULTS.cache_size,
    strict_quality=DEFAULTS.strict_quality,
    **kwargs
):
    """
    pair the forward and reverse reads and write the reads without a mate to separate files

    the reverse reads are stored and the forward reads are streamed against them. Pairs are
    written in the order of the forward file

    Args:
        forward (str): path to the forward reads
        reverse (str): path to the reverse reads
        forw_paired (str): output path for the paired forward reads
        rev_paired (str): output path for the paired reverse reads
        forw_unpaired (str): output path for the forward reads without a mate
        rev_unpaired (str): output path for the reverse reads without a mate
        in_memory (bool): store the reverse reads in memory instead of the on-disk database

    Returns:
        PairCounts: the read counts
    """
    check_compression(compress)
    counts = PairCounts()
    backend = BACKEND.MEMORY if in_memory else BACKEND.DISK

    with open_store(backend, db_file=db_file, cache_size=cache_size, log=LOG) as store:
        with ExitStack() as stack:
            fp, rp, fs, rs = [
                stack.enter_context(open_output(f)) for f in [forw_paired, rev_paired, forw_unpaired, rev_unpaired]
            ]
            counts.reverse = store_reads(reverse, store, strict_quality=strict_quality)

            LOG('pairing reads from:', forward, time_stamp=True)
            for record in read_records(forward, strict_quality=strict_quality):
                counts.forward += 1
                key = normalize(record.name, record.comment)
                mate = store.remove(key.encode())
                if mate is not None:
                    counts.forward_paired += 1
                    counts.reverse_paired += 1
                    fp.write(format_pair_record(record, key, PAIR_NUMBER.FORWARD))
                    rp.write(mate_record(key, mate, PAIR_NUMBER.REVERSE).to_string())
                else:
                    counts.forward_singleton += 1
                    fs.write(format_pair_record(record, key, PAIR_NUMBER.FORWARD))

            for key, value in store.items():
                counts.reverse_singleton += 1
                rs.write(mate_record(PairKey.decode(key), value, PAIR_NUMBER.REVERSE).to_string())

    compress_files(compress, forw_paired, rev_paired, forw_unpaired, rev_unpaired, log=LOG)

    LOG('Total forward reads in {}: {}'.format(forward, counts.forward))
    LOG('Total reverse reads in {}: {}'.format(reverse, counts.reverse))
    LOG('Total forward paired reads in {}: {}'.format(forw_paired, counts.forward_paired))
    LOG('Total reverse paired reads in {}: {}'.format(rev_paired, counts.reverse_paired))
    LOG('Total forward unpaired reads in {}: {}'.format(forw_unpaired, counts.forward_singleton))
    LOG('Total reverse unpaired reads in {}: {}'.format(rev_unpaired, counts.reverse_singleton))
    LOG('Total paired reads in {} and {}: {}'.format(forw_paired, rev_paired, counts.paired))
    LOG('Total unpaired reads in {} and {}: {}'.format(forw_unpaired, rev_unpaired, counts.singleton))
    return counts


def pairs_to_interleaved(
    forward, reverse, outfile,
    in_memory=DEFAULTS.in_memory,
    compress=DEFAULTS.compress,
    db_file=DEFAULTS.db_file,
    cache_size=DEFAULTS.cache_size,
    strict=DEFAULTS.strict,
    strict_quality=DEFAULTS.strict_quality,
    **kwargs
):
    """
    interleave the paired forward and reverse files. Each forward read is immediately followed by its mate

    the forward reads are stored and the reverse reads are streamed against them so pairs are written
    in the order of the reverse file. Reads without a mate are skipped unless strict is set

    Returns:
        PairCounts: the read counts
    """
    check_compression(compress)
    counts = PairCounts()
    backend = BACKEND.MEMORY if in_memory else BACKEND.DISK

    with open_store(backend, db_file=db_file, cache_size=cache_size, log=LOG) as store:
        with open_output(outfile) as out:
            counts.forward = store_reads(forward, store, strict_quality=strict_quality)

            LOG('interleaving reads from:', reverse, time_stamp=True)
            for record in read_records(reverse, strict_quality=strict_quality):
                counts.reverse += 1
                key = normalize(record.name, record.comment)
                mate = store.remove(key.encode())
                if mate is None:
                    if strict:
                        raise UnmatchedRecordError('reverse read has no forward mate', record.header, reverse)
                    counts.dropped += 1
                    continue
                counts.forward_paired += 1
                counts.reverse_paired += 1
                out.write(mate_record(key, mate, PAIR_NUMBER.FORWARD).to_string())
                out.write(format_pair_record(record, key, PAIR_NUMBER.REVERSE))

            unmatched = len(store)
            if unmatched and strict:
                raise UnmatchedRecordError('{} forward read(s) have no reverse mate'.format(unmatched), forward)
            counts.dropped += unmatched

    compress_files(compress, outfile, log=LOG)
    LOG('Total interleaved pairs in {}: {}'.format(outfile, counts.forward_paired))
    if counts.dropped:
        LOG('skipped {} read(s) without a mate'.format(counts.dropped))
    return counts


def classify_pair(record):
    """
    decide which mate an interleaved read is. The comment is checked first (1:N:0 style) and then the
    last character of the name

    Returns:
        str: the pair number or None if the read cannot be classified
    """
    for pair in [PAIR_NUMBER.FORWARD, PAIR_NUMBER.REVERSE]:
        if record.comment is not None and record.comment.startswith(pair):
            return pair
        if record.name.endswith(pair):
            return pair
    return None


def interleaved_to_pairs(
    infile, forward, reverse,
    compress=DEFAULTS.compress,
    strict=DEFAULTS.strict,
    strict_quality=DEFAULTS.strict_quality,
    **kwargs
):
    """
    split an interleaved file into separate files of forward and reverse reads. The headers are
    written as they were read. Reads which are neither forward nor reverse are skipped unless strict is set

    Returns:
        PairCounts: the read counts
    """
    check_compression(compress)
    counts = PairCounts()
    with open_output(forward) as fout, open_output(reverse) as rout:
        for record in read_records(infile, strict_quality=strict_quality):
            pair = classify_pair(record)
            if pair == PAIR_NUMBER.FORWARD:
                counts.forward += 1
                fout.write(record.to_string())
            elif pair == PAIR_NUMBER.REVERSE:
                counts.reverse += 1
                rout.write(record.to_string())
            elif strict:
                raise UnmatchedRecordError('read is neither a forward nor a reverse read', record.header, infile)
            else:
                counts.dropped += 1

    compress_files(compress, forward, reverse, log=LOG)
    LOG('Total forward reads in {}: {}'.format(forward, counts.forward))
    LOG('Total reverse reads in {}: {}'.format(reverse, counts.reverse))
    if counts.dropped:
        LOG('skipped {} read(s) which could not be assigned as forward or reverse'.format(counts.dropped))
    return counts
