import sys
import argparse
import logging

from typing import List, Optional

from melon.cli import cli


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='melon')

    parser.add_argument(
        '--verbose',
        action='store_true',
        required=False,
        default=False,
        help='verbose output',
    )

    parser.add_argument(
        '--no-verbose',
        nargs='+',
        type=str,
        default=None,
        help='name of loggers to disable',
    )

    parser.add_argument(
        '--version',
        action='store_true',
        required=False,
        default=False,
        help='print version and exit',
    )

    subparsers = parser.add_subparsers(dest='command')

    lint_parser = subparsers.add_parser('lint', description='report steps that has no step implementation')
    lint_parser.add_argument(
        '--steps',
        action='append',
        required=True,
        help='step source, `package.module[:attribute]` or `path/to/steps.py[:attribute]`',
    )
    lint_parser.add_argument(
        'files',
        nargs='+',
        type=str,
        help='feature files or directories with feature files, "." for current directory',
    )

    args = parser.parse_args()

    if args.version:
        from melon import __version__

        print(__version__, file=sys.stderr)

        raise SystemExit(0)

    if args.command is None:
        parser.error('no command specified')

    return args


def setup_logging(args: argparse.Namespace) -> None:
    level = logging.INFO if not args.verbose else logging.DEBUG

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    no_verbose: Optional[List[str]] = args.no_verbose

    if no_verbose is None:
        no_verbose = []

    # always supress these loggers
    no_verbose.append('parse')

    for logger_name in no_verbose:
        if logger_name in logging.Logger.manager.loggerDict:
            logger = logging.getLogger(logger_name)
            logger.setLevel(logging.ERROR)
        else:
            print(f'!! logger "{logger_name}" does not exist', file=sys.stderr)


def main() -> int:
    args = parse_arguments()

    setup_logging(args)

    return cli(args)


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
