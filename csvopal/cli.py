"""
CLI: CSV (stdin) -> OPAL script (stdout)

Usage:
    cat data.csv | python -m csvopal -x 5 -d 1,2,4 -l 1:vf,2:vt,4:last \
        -t 1:from_nanoseconds,from_nanoseconds,string,int64

This drops input column 5, strips `"` from columns 1, 2 and 4, renames
columns 1, 2 and 4 (the rest keep their header names) and casts every column
either by list position or by `N:` column number. Columns are counted from 1.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional, TextIO

from csvopal.errors import CsvOpalUserError
from csvopal.logging_conf import DEBUG_ENV, configure_logging, debug_from_env
from csvopal.models.options import ColumnOptions
from csvopal.models.pipeline import Pipeline
from csvopal.models.sources import STDIN, CsvSource

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise CsvOpalUserError("E_CLI_USAGE", message, hint=self.format_usage().strip())


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="csvopal",
        description="Format a CSV on stdin as an OPAL script that rebuilds the rows.",
        epilog=f"Set {DEBUG_ENV}=1 to trace like -D.",
        allow_abbrev=False,
    )
    p.add_argument("-x", dest="drop", metavar="COLS", help="input column numbers to drop, comma separated")
    p.add_argument("-d", dest="dequote", metavar="COLS", help="input column numbers to dequote, comma separated")
    p.add_argument(
        "-l",
        dest="labels",
        metavar="LABELS",
        help="column labels instead of the header row, comma separated or colon indexed e.g. 1:vf,4:last",
    )
    p.add_argument(
        "-t",
        dest="types",
        metavar="CASTS",
        help="OPAL type conversion function per input column, comma separated or colon indexed "
        "e.g. 3:int64 (default: string)",
    )
    p.add_argument("-D", dest="debug", action="store_true", help="trace internal state on stderr")
    p.add_argument("-c", dest="config", metavar="FILE", help="YAML options file; flags override its keys")
    p.add_argument("-i", dest="input", metavar="FILE", default=STDIN, help="read the CSV from FILE (default: stdin)")
    return p


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    debug = debug_from_env()
    configure_logging(debug)
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.debug and not debug:
            debug = True
            configure_logging(debug)

        base = ColumnOptions.load_yaml(args.config) if args.config else None
        options = ColumnOptions.from_flags(
            drop=args.drop,
            dequote=args.dequote,
            labels=args.labels,
            types=args.types,
            debug=debug,
            base=base,
        )
        if options.debug and not debug:
            configure_logging(True)

        pipe = Pipeline(CsvSource(args.input), options)
        log.debug("%s", pipe)
        pipe.run(out if out is not None else sys.stdout)
    except CsvOpalUserError as e:
        if e.code == "E_CLI_USAGE":
            # usage text follows on its own lines
            log.error("%s", e)
            return EXIT_USAGE
        log.error("%s", e.oneline())
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
