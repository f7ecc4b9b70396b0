"""
ETL Pipeline Orchestrator - Coordinates Extract, DQ, Transform, and Load.

Flow per line: Tokenize → Validate → Transform → Route

Lines are processed strictly one after another; a malformed line degrades
to a diagnostic and never aborts the file or the batch.
"""
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union
from .config import Config
from .dq import RecordValidator
from .extract import read_lines, tokenize
from .load import OutputRouter
from .models import FileResult, SchemaVersion
from .schema import detect_schema_version, get_schema_version
from .transform import RecordTransformer


PathLike = Union[str, Path]


class ConversionPipeline:
    """
    Batch driver for one run. Owns the output router, so stale output
    files are reset at most once per run no matter how many inputs
    share an account.
    """

    def __init__(self, version: Optional[str] = None, output_dir: Optional[PathLike] = None,
                 encoding: Optional[str] = None):
        self.forced_version = get_schema_version(version) if version else None
        self.default_version = get_schema_version(Config.DEFAULT_VERSION)
        self.encoding = encoding or Config.ENCODING
        self.router = OutputRouter(output_dir if output_dir is not None else Config.OUTPUT_FOLDER)
        self.validator = RecordValidator()

    def process(self, file_path: PathLike) -> Iterator[Tuple[str, Optional[FileResult]]]:
        """
        Process one export file.
        Yields (message, None) for diagnostics and finally (summary, FileResult).
        """
        result = FileResult(source_file=str(file_path))

        try:
            lines = read_lines(file_path, self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logging.error(f"Cannot read {file_path}: {e}")
            result.success = False
            result.error = str(e)
            yield f"Error: {e}", result
            return

        version = self._select_version(lines)
        result.schema_version = version.tag
        logging.info(f"Converting {file_path} as {version.tag} ({version.description})")

        transformer = RecordTransformer(version)
        data_lines = lines[1:] if version.has_header else lines

        for line_no, line in data_lines:
            record = tokenize(line)

            issues = self.validator.validate(record, version)
            if issues:
                result.invalid_count += 1
                message = f"line {line_no}: {RecordValidator.describe(issues)}"
                logging.warning(f"{file_path} {message}")
                yield message, None

            target = transformer.to_target(record)
            key = record[version.account] if len(record) > version.account else ""

            routed = self.router.route(file_path, key, target.render())
            if routed.error:
                result.write_failures += 1
                yield f"line {line_no}: {routed.error}", None

            if routed.key not in result.accounts:
                result.accounts.append(routed.key)
            result.line_count += 1

        logging.info(f"Finished {file_path}: {result.line_count} lines, "
                     f"{result.invalid_count} invalid, accounts={result.accounts}")
        yield "Done", result

    def run(self, file_paths: Iterable[PathLike]) -> List[FileResult]:
        results = []
        for file_path in file_paths:
            for _, result in self.process(file_path):
                if result is not None:
                    results.append(result)
        return results

    def _select_version(self, lines: List[Tuple[int, str]]) -> SchemaVersion:
        if self.forced_version:
            return self.forced_version
        detected = detect_schema_version(lines[0][1]) if lines else None
        return detected or self.default_version
