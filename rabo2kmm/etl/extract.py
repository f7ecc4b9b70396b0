"""
Extract Layer - Quoted field extraction and input file reading.

Rabobank exports quote every field, so a line is tokenized by collecting
each "..." pair. Text between pairs (commas, stray whitespace) is ignored.
Nested or doubled quotes are not part of the format and are not handled.
"""
import re
import logging
from pathlib import Path
from typing import List, Tuple, Union

QUOTED_FIELD = re.compile(r'"([^"]*)"')
LINE_BREAK = re.compile(r"\r?\n")


def tokenize(line: str) -> List[str]:
    """Return the quoted fields of a line in source order, quotes removed."""
    return QUOTED_FIELD.findall(line)


def read_lines(file_path: Union[str, Path], encoding: str = "utf-8") -> List[Tuple[int, str]]:
    """
    Read a whole export file and return its non-blank lines with their
    1-based physical line numbers.

    Only LF and CRLF end a line; other Unicode separators stay inside the
    field they appear in. Raises OSError or UnicodeDecodeError; the caller
    decides whether that ends the file or the run.
    """
    logging.info(f"Reading export: {file_path}")
    with open(file_path, "r", encoding=encoding, newline="") as f:
        text = f.read()
    return [(line_no, line)
            for line_no, line in enumerate(LINE_BREAK.split(text), start=1)
            if line.strip()]
