import bz2
import gzip
import os

import pytest

from pairfq.error import PairNumberError, UnmatchedRecordError, UnrecognizedHeaderError
from pairfq.pairing.main import (
    add_pair_info,
    classify_pair,
    interleaved_to_pairs,
    make_pairs_and_singles,
    pair_suffix,
    PairCounts,
    pairs_to_interleaved,
)
from pairfq.record import SequenceRecord

from ..util import get_data, read_text, split_records, write_text


@pytest.fixture(params=[True, False], ids=['memory', 'disk'])
def in_memory(request):
    return request.param


@pytest.fixture
def db_file(tmp_path):
    return str(tmp_path / 'pairfq.bdb')


def make_pairs(tmp_path, forward, reverse, **kwargs):
    outputs = {name: str(tmp_path / '{}.fq'.format(name)) for name in ['fp', 'rp', 'fs', 'rs']}
    counts = make_pairs_and_singles(
        forward, reverse, outputs['fp'], outputs['rp'], outputs['fs'], outputs['rs'], **kwargs
    )
    return counts, outputs


class TestPairSuffix:
    def test_valid(self):
        assert pair_suffix(1) == '1'
        assert pair_suffix('2') == '2'

    def test_invalid(self):
        with pytest.raises(PairNumberError):
            pair_suffix(3)


class TestClassifyPair:
    def test_slash_name(self):
        assert classify_pair(SequenceRecord('r1/1', 'A')) == '1'
        assert classify_pair(SequenceRecord('r1/2', 'A')) == '2'

    def test_comment(self):
        assert classify_pair(SequenceRecord('r1', 'A', comment='1:N:0:ACGT')) == '1'
        assert classify_pair(SequenceRecord('r1', 'A', comment='2:N:0:ACGT')) == '2'

    def test_neither(self):
        assert classify_pair(SequenceRecord('unpaired', 'A')) is None
        assert classify_pair(SequenceRecord('read', 'A', comment='x')) is None


class TestAddPairInfo:
    def test_fasta_comment_dropped(self, tmp_path):
        outfile = str(tmp_path / 'out.fa')
        counts = add_pair_info(1, get_data('no_pair_info.fa'), outfile)
        assert read_text(outfile) == '>read_one/1\nACGT\n>read_two/1\nTTTT\n'
        assert counts == PairCounts(forward=2)

    def test_fastq_reverse(self, tmp_path):
        infile = write_text(tmp_path / 'in.fq', '@r1\nACGT\n+\n!!!!\n')
        outfile = str(tmp_path / 'out.fq')
        counts = add_pair_info(2, infile, outfile)
        assert read_text(outfile) == '@r1/2\nACGT\n+\n!!!!\n'
        assert counts.reverse == 1

    def test_bad_pairnum(self, tmp_path):
        with pytest.raises(PairNumberError):
            add_pair_info(3, get_data('no_pair_info.fa'), str(tmp_path / 'out.fa'))
        assert not os.path.exists(str(tmp_path / 'out.fa'))

    def test_gzip_output(self, tmp_path):
        outfile = str(tmp_path / 'out.fa')
        add_pair_info(1, get_data('no_pair_info.fa'), outfile, compress='gzip')
        assert not os.path.exists(outfile)
        with gzip.open(outfile + '.gz', 'rt') as fh:
            assert fh.read() == '>read_one/1\nACGT\n>read_two/1\nTTTT\n'

    def test_bad_compression(self, tmp_path):
        with pytest.raises(ValueError):
            add_pair_info(1, get_data('no_pair_info.fa'), str(tmp_path / 'out.fa'), compress='zip')


class TestMakePairsAndSingles:
    def test_fastq(self, tmp_path, in_memory, db_file):
        counts, outputs = make_pairs(
            tmp_path, get_data('forward.fq'), get_data('reverse.fq'), in_memory=in_memory, db_file=db_file
        )
        assert read_text(outputs['fp']) == (
            '@r1/1\nACGTACGTACGTAC\n+\nIIIIIIIIIIIIII\n'
            '@r2/1\nGGGGCCCC\n+\n@@@@AAAA\n'
            '@r3/1\nTTTTAAAA\n+\n>>>>????\n'
        )
        assert read_text(outputs['rp']) == (
            '@r1/2\nTTTTGGGG\n+\nHHHHHHHH\n'
            '@r2/2\nCCCCAAAA\n+\nFFFFFFFF\n'
            '@r3/2\nAAAATTTT\n+\nGGGGGGGG\n'
        )
        assert read_text(outputs['fs']) == '@r4/1\nCCCCGGGG\n+\nIIIIIIII\n'
        assert read_text(outputs['rs']) == '@r5/2\nGATTACA\n+\nEEEEEEE\n'
        assert counts == PairCounts(
            forward=4, reverse=4, forward_paired=3, reverse_paired=3, forward_singleton=1, reverse_singleton=1
        )
        assert counts.paired == 6
        assert counts.singleton == 2
        assert not os.path.exists(db_file)

    def test_partition_is_complete(self, tmp_path, in_memory, db_file):
        counts, outputs = make_pairs(
            tmp_path, get_data('forward.fa'), get_data('reverse.fa'), in_memory=in_memory, db_file=db_file
        )
        assert counts.forward_paired + counts.forward_singleton == counts.forward
        assert counts.reverse_paired + counts.reverse_singleton == counts.reverse
        assert len(split_records(read_text(outputs['fp']))) == counts.forward_paired
        assert len(split_records(read_text(outputs['rs']))) == counts.reverse_singleton
        assert read_text(outputs['rs']) == '>r9/2\nAAAA\n'
        assert read_text(outputs['fs']) == ''

    def test_casava_headers(self, tmp_path, in_memory, db_file):
        counts, outputs = make_pairs(
            tmp_path, get_data('forward_casava.fq'), get_data('reverse_casava.fq'),
            in_memory=in_memory, db_file=db_file
        )
        assert read_text(outputs['fp']) == '@r2 1:N:0:ACGT\nGGGGCCCC\n+\nIIIIIIII\n'
        assert read_text(outputs['rp']) == '@r2 2:N:0:ACGT\nTTTTAAAA\n+\nHHHHHHHH\n'
        assert read_text(outputs['fs']) == '@r1 1:N:0:ACGT\nACGTACGT\n+\nIIIIIIII\n'
        assert read_text(outputs['rs']) == '@r3 2:N:0:ACGT\nCCCCCCCC\n+\nHHHHHHHH\n'
        assert counts.paired == 2

    def test_no_mates(self, tmp_path, in_memory, db_file):
        forward = write_text(tmp_path / 'f.fa', '>r1/1\nACGT\n')
        reverse = write_text(tmp_path / 'r.fa', '>r2/2\nTTTT\n')
        counts, outputs = make_pairs(tmp_path, forward, reverse, in_memory=in_memory, db_file=db_file)
        assert read_text(outputs['fp']) == ''
        assert read_text(outputs['rp']) == ''
        assert read_text(outputs['fs']) == '>r1/1\nACGT\n'
        assert read_text(outputs['rs']) == '>r2/2\nTTTT\n'
        assert counts.singleton == 2

    def test_backends_agree(self, tmp_path):
        results = {}
        for in_memory in [True, False]:
            outdir = tmp_path / str(in_memory)
            outdir.mkdir()
            counts, outputs = make_pairs(
                outdir, get_data('forward.fq'), get_data('reverse.fq'),
                in_memory=in_memory, db_file=str(outdir / 'pairfq.bdb')
            )
            results[in_memory] = (
                counts,
                read_text(outputs['fp']),
                read_text(outputs['rp']),
                set(split_records(read_text(outputs['fs']))),
                set(split_records(read_text(outputs['rs']))),
            )
        assert results[True] == results[False]

    def test_unrecognized_header(self, tmp_path, in_memory, db_file):
        with pytest.raises(UnrecognizedHeaderError):
            make_pairs(
                tmp_path, get_data('no_pair_info.fa'), get_data('reverse.fa'), in_memory=in_memory, db_file=db_file
            )
        assert not os.path.exists(db_file)

    def test_bzip2_outputs(self, tmp_path, db_file):
        counts, outputs = make_pairs(
            tmp_path, get_data('forward.fa'), get_data('reverse.fa'), compress='bzip2', db_file=db_file
        )
        for filename in outputs.values():
            assert not os.path.exists(filename)
            assert os.path.exists(filename + '.bz2')
        with bz2.open(outputs['rp'] + '.bz2', 'rt') as fh:
            assert fh.read() == '>r1/2\nTTTT\n>r2/2\nCCCC\n'


class TestPairsToInterleaved:
    def test_fasta(self, tmp_path, in_memory, db_file):
        outfile = str(tmp_path / 'out.fa')
        counts = pairs_to_interleaved(
            get_data('forward.fa'), get_data('reverse.fa'), outfile, in_memory=in_memory, db_file=db_file
        )
        assert read_text(outfile) == '>r2/1\nGGGG\n>r2/2\nCCCC\n>r1/1\nACGTACGTACGT\n>r1/2\nTTTT\n'
        assert counts == PairCounts(forward=2, reverse=3, forward_paired=2, reverse_paired=2, dropped=1)
        assert not os.path.exists(db_file)

    def test_single_pair(self, tmp_path, in_memory, db_file):
        forward = write_text(tmp_path / 'f.fa', '>r1/1\nACGT\n')
        reverse = write_text(tmp_path / 'r.fa', '>r1/2\nTTTT\n')
        outfile = str(tmp_path / 'out.fa')
        pairs_to_interleaved(forward, reverse, outfile, in_memory=in_memory, db_file=db_file)
        assert read_text(outfile) == '>r1/1\nACGT\n>r1/2\nTTTT\n'

    def test_no_mates(self, tmp_path, in_memory, db_file):
        forward = write_text(tmp_path / 'f.fa', '>r1/1\nACGT\n')
        reverse = write_text(tmp_path / 'r.fa', '>r2/2\nTTTT\n')
        outfile = str(tmp_path / 'out.fa')
        counts = pairs_to_interleaved(forward, reverse, outfile, in_memory=in_memory, db_file=db_file)
        assert read_text(outfile) == ''
        assert counts.dropped == 2

    def test_strict_unmatched_reverse(self, tmp_path, in_memory, db_file):
        with pytest.raises(UnmatchedRecordError):
            pairs_to_interleaved(
                get_data('forward.fa'), get_data('reverse.fa'), str(tmp_path / 'out.fa'),
                in_memory=in_memory, db_file=db_file, strict=True
            )
        assert not os.path.exists(db_file)

    def test_strict_unmatched_forward(self, tmp_path, in_memory, db_file):
        reverse = write_text(tmp_path / 'r.fa', '>r1/2\nTTTT\n')
        with pytest.raises(UnmatchedRecordError):
            pairs_to_interleaved(
                get_data('forward.fa'), reverse, str(tmp_path / 'out.fa'),
                in_memory=in_memory, db_file=db_file, strict=True
            )

    def test_round_trip_from_makepairs(self, tmp_path, in_memory, db_file):
        counts, outputs = make_pairs(
            tmp_path, get_data('forward.fq'), get_data('reverse.fq'), in_memory=in_memory, db_file=db_file
        )
        outfile = str(tmp_path / 'interleaved.fq')
        joined = pairs_to_interleaved(outputs['fp'], outputs['rp'], outfile, in_memory=in_memory, db_file=db_file)
        assert joined.forward_paired == counts.forward_paired
        assert joined.dropped == 0

        records = split_records(read_text(outfile))
        forward = split_records(read_text(outputs['fp']))
        reverse = split_records(read_text(outputs['rp']))
        assert records[0::2] == forward
        assert records[1::2] == reverse

    def test_split_undoes_interleave(self, tmp_path, in_memory, db_file):
        counts, outputs = make_pairs(
            tmp_path, get_data('forward.fq'), get_data('reverse.fq'), in_memory=in_memory, db_file=db_file
        )
        interleaved = str(tmp_path / 'interleaved.fq')
        pairs_to_interleaved(outputs['fp'], outputs['rp'], interleaved, in_memory=in_memory, db_file=db_file)
        forward = str(tmp_path / 'split_1.fq')
        reverse = str(tmp_path / 'split_2.fq')
        interleaved_to_pairs(interleaved, forward, reverse)
        assert read_text(forward) == read_text(outputs['fp'])
        assert read_text(reverse) == read_text(outputs['rp'])


class TestInterleavedToPairs:
    def test_split(self, tmp_path):
        forward = str(tmp_path / 'f.fq')
        reverse = str(tmp_path / 'r.fq')
        counts = interleaved_to_pairs(get_data('interleaved.fq'), forward, reverse)
        assert read_text(forward) == '@r1/1\nACGT\n+\nIIII\n@r2 1:N:0:ACGT\nGGGG\n+\nIIII\n'
        assert read_text(reverse) == '@r1/2\nTTTT\n+\nHHHH\n@r2 2:N:0:ACGT\nCCCC\n+\nHHHH\n'
        assert counts == PairCounts(forward=2, reverse=2, dropped=1)

    def test_strict(self, tmp_path):
        with pytest.raises(UnmatchedRecordError):
            interleaved_to_pairs(
                get_data('interleaved.fq'), str(tmp_path / 'f.fq'), str(tmp_path / 'r.fq'), strict=True
            )

    def test_gzip_input_and_output(self, tmp_path):
        infile = str(tmp_path / 'interleaved.fq.gz')
        with gzip.open(infile, 'wt') as fh:
            fh.write(read_text(get_data('interleaved.fq')))
        forward = str(tmp_path / 'f.fq')
        reverse = str(tmp_path / 'r.fq')
        interleaved_to_pairs(infile, forward, reverse, compress='gzip')
        with gzip.open(forward + '.gz', 'rt') as fh:
            assert fh.read().startswith('@r1/1\nACGT\n')
        assert os.path.exists(reverse + '.gz')
