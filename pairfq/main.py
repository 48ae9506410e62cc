#!python
import argparse
from contextlib import contextmanager
import logging
import platform
import signal
import sqlite3
import sys
import time

from . import __version__
from . import config as _config
from .constants import EXIT_ERROR, EXIT_OK, SUBCOMMAND
from .error import FormatError, UnmatchedRecordError
from .pairing import main as pairing_main
from . import util as _util

TASK_DESCRIPTION = {
    SUBCOMMAND.ADDINFO: 'Add the pair info back to the FastA/Q header.',
    SUBCOMMAND.MAKEPAIRS: 'Pair the forward and reverse reads and write singletons for both forward and reverse '
    'reads to separate files.',
    SUBCOMMAND.JOINPAIRS: 'Interleave the paired forward and reverse files.',
    SUBCOMMAND.SPLITPAIRS: 'Split the interleaved file into separate files for the forward and reverse reads.',
}

TASK_OPTIONS = {
    SUBCOMMAND.ADDINFO: ['compress', 'strict_quality'],
    SUBCOMMAND.MAKEPAIRS: ['in_memory', 'compress', 'db_file', 'cache_size', 'strict_quality'],
    SUBCOMMAND.JOINPAIRS: ['in_memory', 'compress', 'db_file', 'cache_size', 'strict', 'strict_quality'],
    SUBCOMMAND.SPLITPAIRS: ['compress', 'strict', 'strict_quality'],
}


def create_parser():
    parser = argparse.ArgumentParser(
        formatter_class=_config.CustomHelpFormatter,
        description='Sync paired-end sequences from separate FastA/Q files')
    _config.augment_parser(['version'], parser)
    subp = parser.add_subparsers(dest='command', help='specifies which task to perform')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False,
            help=TASK_DESCRIPTION[command], description=TASK_DESCRIPTION[command])
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        _config.augment_parser(['help', 'version', 'log', 'log_level'], optional[command])
        _config.augment_parser(TASK_OPTIONS[command], optional[command])

    # addinfo
    required[SUBCOMMAND.ADDINFO].add_argument(
        '-i', '--infile', required=True, type=_util.filepath, metavar='FILEPATH',
        help='The file of sequences without the pair information in the sequence name.')
    required[SUBCOMMAND.ADDINFO].add_argument(
        '-o', '--outfile', required=True, metavar='FILEPATH',
        help='The file of sequences that will contain the sequence names with the pair information.')
    required[SUBCOMMAND.ADDINFO].add_argument(
        '-p', '--pairnum', required=True, type=_config.pair_number, metavar='{1,2}',
        help='The number to append to the sequence name.')

    # inputs shared by makepairs and joinpairs
    for command in [SUBCOMMAND.MAKEPAIRS, SUBCOMMAND.JOINPAIRS]:
        required[command].add_argument(
            '-f', '--forward', required=True, type=_util.filepath, metavar='FILEPATH',
            help='File of forward reads (usually with "/1" or " 1" in the header).')
        required[command].add_argument(
            '-r', '--reverse', required=True, type=_util.filepath, metavar='FILEPATH',
            help='File of reverse reads (usually with "/2" or " 2" in the header).')

    # makepairs
    for flag, dest, help_msg in [
        ('-fp', 'forw_paired', 'Name for the file of paired forward reads.'),
        ('-rp', 'rev_paired', 'Name for the file of paired reverse reads.'),
        ('-fs', 'forw_unpaired', 'Name for the file of singleton forward reads.'),
        ('-rs', 'rev_unpaired', 'Name for the file of singleton reverse reads.'),
    ]:
        required[SUBCOMMAND.MAKEPAIRS].add_argument(
            flag, '--{}'.format(dest), dest=dest, required=True, metavar='FILEPATH', help=help_msg)

    # joinpairs
    required[SUBCOMMAND.JOINPAIRS].add_argument(
        '-o', '--outfile', required=True, metavar='FILEPATH', help='File of interleaved reads.')

    # splitpairs
    required[SUBCOMMAND.SPLITPAIRS].add_argument(
        '-i', '--infile', required=True, type=_util.filepath, metavar='FILEPATH',
        help='File of interleaved forward and reverse reads.')
    required[SUBCOMMAND.SPLITPAIRS].add_argument(
        '-f', '--forward', required=True, metavar='FILEPATH', help='File to place the forward reads.')
    required[SUBCOMMAND.SPLITPAIRS].add_argument(
        '-r', '--reverse', required=True, metavar='FILEPATH', help='File to place the reverse reads.')
    return parser


def _raise_exit(signum, frame):
    raise SystemExit('received signal {}'.format(signum))


@contextmanager
def exit_on_signal(*signums):
    """
    turn termination signals into SystemExit so that cleanup (ex. removing the sequence
    database) runs the same way it does for a keyboard interrupt
    """
    previous = {}
    for signum in signums:
        previous[signum] = signal.signal(signum, _raise_exit)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def main(argv=None):
    """
    sets up the parser and checks the validity of command line args
    then redirects into the task functions

    Args:
        argv (list): List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())

    parser = create_parser()
    args = vars(parser.parse_args(argv))

    log_conf = {'format': '{message}', 'style': '{', 'level': args['log_level']}

    original_logging_handlers = logging.root.handlers[:]
    for handler in original_logging_handlers:
        logging.root.removeHandler(handler)
    if args['log']:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args['log']
    logging.basicConfig(**log_conf)

    _util.LOG('pairfq: {}'.format(__version__))
    _util.LOG('hostname:', platform.node(), time_stamp=False)
    _util.log_arguments(args)

    ret_val = EXIT_OK
    # remove the arguments needed for redirect/setup only
    command = args.pop('command')
    log_to_file = args.pop('log')
    args.pop('log_level')

    termination_signals = [signal.SIGTERM]
    if hasattr(signal, 'SIGHUP'):
        termination_signals.append(signal.SIGHUP)

    try:
        with exit_on_signal(*termination_signals):
            if command == SUBCOMMAND.ADDINFO:
                pairing_main.add_pair_info(**args, start_time=start_time)
            elif command == SUBCOMMAND.MAKEPAIRS:
                pairing_main.make_pairs_and_singles(**args, start_time=start_time)
            elif command == SUBCOMMAND.JOINPAIRS:
                pairing_main.pairs_to_interleaved(**args, start_time=start_time)
            else:  # SPLITPAIRS
                pairing_main.interleaved_to_pairs(**args, start_time=start_time)

        duration = int(time.time()) - start_time
        hours = duration - duration % 3600
        minutes = duration - hours - (duration - hours) % 60
        seconds = duration - hours - minutes
        _util.LOG(
            'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds),
            time_stamp=False)
        _util.LOG('run time (s): {}'.format(duration), time_stamp=False)
        return ret_val
    except (FormatError, UnmatchedRecordError, OSError, sqlite3.Error) as err:
        if log_to_file:
            logging.exception(err)  # capture the error in the logging output file
        _util.LOG('ERROR: {}'.format(' '.join([str(a) for a in err.args])), level=logging.ERROR)
        return EXIT_ERROR
    except Exception as err:
        if log_to_file:
            logging.exception(err)
        raise err
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)


def interleave_main(argv=None):
    """
    entry point for the stand-alone interleave command. Takes the joinpairs options
    """
    if argv is None:
        argv = sys.argv[1:]
    return main([SUBCOMMAND.JOINPAIRS] + list(argv))


if __name__ == '__main__':
    sys.exit(main())
