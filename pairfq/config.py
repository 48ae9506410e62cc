import argparse

from . import __version__
from .constants import COMPRESSION, cast_boolean, positive_int
from .error import PairNumberError
from .pairing.constants import DEFAULTS as PAIRING_DEFAULTS
from .pairing.main import pair_suffix
from .util import filepath, get_env_variable


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type in [positive_int, int]:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    elif arg_type == COMPRESSION:
        return '{{{}}}'.format(','.join(COMPRESSION.values()))
    return None


def pair_number(value):
    """
    argparse type for the --pairnum argument

    Raises:
        argparse.ArgumentTypeError: the value is not 1 or 2
    """
    try:
        return pair_suffix(value)
    except PairNumberError as err:
        raise argparse.ArgumentTypeError(str(err))


# short flags kept from the original command line interface
SHORT_FLAGS = {
    'in_memory': '-im',
    'compress': '-c',
}


def augment_parser(arguments, parser, required=None):
    """
    Adds options to the argument parser. Separate function to facilitate the pipeline steps
    all having a similar look/feel
    """
    if required is None:
        required = False

    for arg in arguments:
        if arg == 'help':
            parser.add_argument('-h', '--help', action='help', help='show this help message and exit')
        elif arg == 'version':
            parser.add_argument(
                '-v', '--version', action='version', version='%(prog)s version ' + __version__,
                help='Outputs the version number')
        elif arg == 'log':
            parser.add_argument('--log', help='redirect stdout to a log file', default=None)
        elif arg == 'log_level':
            parser.add_argument(
                '--log_level', help='level of logging to output', choices=['INFO', 'DEBUG', 'WARNING'],
                default=get_env_variable('log_level', 'INFO'))
        elif arg in PAIRING_DEFAULTS:
            flags = ['--{}'.format(arg)]
            if arg in SHORT_FLAGS:
                flags.insert(0, SHORT_FLAGS[arg])
            default = PAIRING_DEFAULTS[arg]
            cast_type = PAIRING_DEFAULTS.type(arg)
            if cast_type == cast_boolean:
                parser.add_argument(
                    *flags, default=default, action='store_true',
                    help=PAIRING_DEFAULTS.define(arg))
            else:
                if arg == 'cache_size':
                    cast_type = positive_int
                parser.add_argument(
                    *flags, default=default, type=cast_type, help=PAIRING_DEFAULTS.define(arg),
                    metavar=get_metavar(cast_type), required=required)
        else:
            raise KeyError('invalid argument', arg)
