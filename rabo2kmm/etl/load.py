"""
Load Layer - Per-account output files for KMyMoney import.

Each record is appended to <input-base>#<account><input-ext> in the output
folder. The first time a path is targeted during a run, a file left over
from a previous run is deleted; later records for that path are appended
in encounter order.

Appends are synchronous (open, write, close) so a record is on disk before
the next line is processed.
"""
import logging
from pathlib import Path
from typing import NamedTuple, Optional, Set, Union


class Routed(NamedTuple):
    key: str
    error: Optional[str] = None


class SinkState:
    """Output paths already reset during the current run."""

    def __init__(self):
        self._seen: Set[Path] = set()

    def __contains__(self, path: Path) -> bool:
        return path in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def mark(self, path: Path) -> None:
        self._seen.add(path)


class OutputRouter:
    """
    Routes rendered records to per-account files.
    One instance per batch run; the reset state lives on the instance.
    """

    def __init__(self, output_dir: Union[str, Path] = ".", state: SinkState = None):
        self.output_dir = Path(output_dir)
        self.state = state if state is not None else SinkState()

    def output_path(self, input_path: Union[str, Path], key: str) -> Path:
        source = Path(input_path)
        return self.output_dir / f"{source.stem}#{key}{source.suffix}"

    def route(self, input_path: Union[str, Path], key: str, line: str) -> Routed:
        """
        Append a rendered line to the file for this account.
        Returns the routing key used and, when the write failed, the error;
        write errors are never raised.
        """
        path = self.output_path(input_path, key)
        try:
            if path not in self.state:
                self._reset(path)
            with open(path, "a", encoding="utf-8") as f:
                f.write(line)
            logging.debug(f"Appended record to {path}")
        except OSError as e:
            message = f"Failed to write {path}: {e}"
            logging.error(message)
            return Routed(key, message)
        return Routed(key)

    def _reset(self, path: Path) -> None:
        # Missing file is fine; anything else stale from an earlier run goes.
        if path.exists():
            logging.info(f"Removing previous output: {path}")
            path.unlink()
        self.state.mark(path)
