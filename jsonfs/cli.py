import argparse
import logging

from . import __version__
from .errors import IndexingError, MountError, ParseError
from .log import ENV_VAR, LEVELS, configure_logging
from .session import MountSession

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='jsonfs',
        description='Mount a JSON document as a read-only filesystem',
        epilog='Verbosity defaults to the %s environment variable.' % ENV_VAR,
    )
    parser.add_argument('descriptor', help='Path to the JSON document')
    parser.add_argument('mountpoint', help='Directory to mount the document on')
    parser.add_argument('--background', action='store_true',
                        help='Detach from the terminal once mounted')
    parser.add_argument('--allow-other', action='store_true',
                        help='Let other users access the mount')
    parser.add_argument('--log-level', choices=sorted(LEVELS), type=str.lower,
                        help='Override %s' % ENV_VAR)
    parser.add_argument('--version', action='version', version='%(prog)s ' + __version__)
    return parser


def _mount(session, args):
    # fuse loads libfuse at import time; only needed once there is something to mount
    try:
        from .fs import mount
    except (ImportError, OSError) as e:
        raise MountError('cannot load libfuse: %s' % e) from e
    mount(session, args.mountpoint, foreground=not args.background,
          allow_other=args.allow_other)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        session = MountSession.from_file(args.descriptor)
    except ParseError as e:
        log.error('Cannot parse %s: %s', args.descriptor, e)
        return 1
    except IndexingError as e:
        log.error('Cannot index %s: %s', args.descriptor, e)
        return 1

    try:
        _mount(session, args)
    except MountError as e:
        log.error('%s', e)
        return 1
    finally:
        session.close()
    return 0
