"""
Command-line front-end.

Converts each given Rabobank export into per-account KMyMoney import files
and prints the accounts found per input file.
"""
import argparse
import logging
import sys
from typing import List, Optional

from rabo2kmm.etl.config import Config
from rabo2kmm.etl.pipeline import ConversionPipeline
from rabo2kmm.etl.schema import SCHEMA_VERSIONS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rabo2kmm",
        description="Convert Rabobank CSV exports to KMyMoney importable CSV files.",
    )
    parser.add_argument("files", nargs="+", help="Rabobank export files")
    parser.add_argument(
        "--format",
        choices=sorted(SCHEMA_VERSIONS),
        default=None,
        help="export version; detected per file when omitted",
    )
    parser.add_argument("--output-dir", default=Config.OUTPUT_FOLDER, help="directory for output files")
    parser.add_argument("--encoding", default=Config.ENCODING, help="input file encoding")
    parser.add_argument("--log-file", default=Config.LOG_FILE, help="log file path")
    return parser


def setup_logging(log_file: str) -> None:
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s'
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file)
    logging.info(f"Starting conversion of {len(args.files)} file(s)")

    pipeline = ConversionPipeline(version=args.format, output_dir=args.output_dir, encoding=args.encoding)
    exit_code = 0

    for fname in args.files:
        print(f"{fname}:")
        for message, result in pipeline.process(fname):
            if result is None:
                print(f"\t{message}")
            elif not result.success:
                print(f"\t***ERROR*** {result.error}")
                exit_code = 1
            else:
                for account in result.accounts:
                    print(f"\t{account}")

    logging.info(f"Validator stats: {pipeline.validator.get_stats()}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
