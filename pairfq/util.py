from datetime import datetime
import bz2
from glob import glob
import gzip
import logging
import os
import shutil

from braceexpand import braceexpand

from .constants import COMPRESSION, COMPRESSION_SUFFIX, ENV_VAR_PREFIX, cast_boolean


class Log:
    """
    callable wrapper around the root logger which lines messages up behind an optional time stamp

    Args:
        level (int): level messages are logged at unless one is given with the call. None silences
            messages that do not give their own level
        indent_level (int): number of indents put in front of every message
    """
    STAMP_FORMAT = '[%Y-%m-%d %H:%M:%S]'
    STAMP_WIDTH = 21

    def __init__(self, level=logging.INFO, indent_level=0, indent_str='  '):
        self.level = level
        self.indent_level = indent_level
        self.indent_str = indent_str

    def __call__(self, *pos, time_stamp=False, level=None, **kwargs):
        level = self.level if level is None else level
        if level is None:
            return
        stamp = datetime.now().strftime(self.STAMP_FORMAT) if time_stamp else ' ' * self.STAMP_WIDTH
        words = ' '.join([str(p) for p in pos])
        logging.log(level, '{} {}{}'.format(stamp, self.indent_str * self.indent_level, words), **kwargs)

    def indent(self):
        return Log(self.level, self.indent_level + 1, self.indent_str)


LOG = Log()
DEVNULL = Log(level=None)


def cast(value, cast_func):
    """
    Example:
        >>> cast('f', bool)
        False
        >>> cast('10', int)
        10
    """
    return cast_boolean(value) if cast_func == bool else cast_func(value)


def get_env_variable(arg, default, cast_type=None):
    """
    Returns:
        the value of the PAIRFQ_<ARG> environment variable cast to the type of the default, or the default
        if the variable is not set
    """
    value = os.environ.get(ENV_VAR_PREFIX + str(arg).upper())
    if value is None:
        return default
    return cast(value, type(default) if cast_type is None else cast_type)


def bash_expands(*expressions):
    """
    expand bash-style brace expressions and file globs

    Returns:
        list of str: the absolute paths of the matching files

    Raises:
        FileNotFoundError: an expression did not match any files
    """
    paths = []
    for expression in expressions:
        matches = [path for name in braceexpand(expression) for path in glob(name)]
        if not matches:
            raise FileNotFoundError('The expression does not match any files', expression)
        paths.extend(matches)
    return [os.path.abspath(path) for path in paths]


def filepath(path):
    """
    argparse type for an input file. The expression must match exactly one existing file
    """
    try:
        matches = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    if len(matches) > 1:
        raise TypeError('File pattern match multiple files and expected only one', path)
    return matches[0]


def log_arguments(args):
    """
    Args:
        args (dict): the parsed command line arguments
    """
    LOG('arguments', time_stamp=True)
    log = LOG.indent()
    for arg, val in sorted(args.items()):
        log(arg, '=', repr(val))


def mkdirp(dirname):
    """
    create a directory and any missing parents. An existing directory is not an error
    """
    if not os.path.isdir(dirname):
        LOG("creating output directory: '{}'".format(dirname))
        os.makedirs(dirname, exist_ok=True)
    return dirname


def open_input(filename):
    """
    open a sequence file for reading as text. Files ending in .gz or .bz2 are decompressed on the fly

    Args:
        filename (str): path to the input file

    Returns:
        file: the open text handle
    """
    if filename.endswith('.gz'):
        return gzip.open(filename, 'rt')
    elif filename.endswith('.bz2'):
        return bz2.open(filename, 'rt')
    return open(filename, 'r')


def open_output(filename):
    """
    open a plain text output file, creating the parent directory if required
    """
    if os.path.dirname(filename) and not os.path.isdir(os.path.dirname(filename)):
        mkdirp(os.path.dirname(filename))
    LOG('writing:', filename)
    return open(filename, 'w')


def check_compression(mode):
    """
    Raises:
        ValueError: the compression mode is not gzip or bzip2
    """
    if mode is None:
        return None
    if mode not in COMPRESSION.values():
        raise ValueError(
            "'{}' is not recognized as an argument to the --compress option. Must be 'gzip' or 'bzip2'".format(mode)
        )
    return mode


def compress_files(mode, *filenames, log=DEVNULL):
    """
    rewrite each (closed) output file compressed and remove the plain original

    Args:
        mode (str): one of the COMPRESSION values or None to leave the files as they are
        filenames (str): paths to the plain text files

    Returns:
        list of str: the paths to the final output files
    """
    if mode is None:
        return list(filenames)
    check_compression(mode)
    opener = gzip.open if mode == COMPRESSION.GZIP else bz2.open
    result = []
    for filename in filenames:
        compressed = filename + COMPRESSION_SUFFIX[mode]
        log('compressing:', filename, '->', compressed)
        with open(filename, 'rb') as fh_in, opener(compressed, 'wb') as fh_out:
            shutil.copyfileobj(fh_in, fh_out)
        os.remove(filename)
        result.append(compressed)
    return result
