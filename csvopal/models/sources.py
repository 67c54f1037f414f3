from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

import petl as etl

from csvopal.errors import CsvOpalUserError

log = logging.getLogger(__name__)

STDIN = "-"


@dataclass(frozen=True)
class CsvSource:
    """
    A comma separated input read with PETL.

    Quote characters are not interpreted: `"a","b"` yields the cells `"a"` and
    `"b"` with their quotes intact, and commas always split fields.

    `uri` is a file path, `None` / "-" for standard input, or any PETL source
    object (e.g. `petl.MemorySource`).
    """
    uri: Optional[Any] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.uri, Path):
            object.__setattr__(self, "uri", str(self.uri))
        if self.uri == STDIN:
            object.__setattr__(self, "uri", None)

        # Fail fast on a missing file before anything is written to the output.
        if isinstance(self.uri, str) and not os.path.exists(self.uri):
            raise CsvOpalUserError(
                "E_INPUT_NOT_FOUND",
                f"Input file not found: '{self.uri}'.",
                hint="Check the -i path, or pipe the CSV on standard input.",
            )

    @property
    def is_stdin(self) -> bool:
        return self.uri is None

    # ---------- PETL table (lazy) ----------
    def table(self):
        """
        Return a PETL table. Reading occurs on iteration, so a stdin table can be iterated only once.
        """
        opts: Dict[str, Any] = {"encoding": "utf-8", "delimiter": ",", "quoting": csv.QUOTE_NONE}
        opts.update(self.options)
        try:
            return etl.fromcsv(self.uri, **opts)
        except FileNotFoundError as e:
            raise CsvOpalUserError(
                "E_INPUT_NOT_FOUND",
                f"Input file not found: '{self.uri}'.",
                hint="Check the -i path, or pipe the CSV on standard input.",
            ) from e
        except Exception as e:
            raise CsvOpalUserError(
                "E_INPUT_READ",
                f"Could not open input '{self._name()}': {type(e).__name__}: {e}",
                hint="Check file permissions and encoding.",
            ) from e

    def rows(self) -> Iterator[Tuple[str, ...]]:
        """Yield every line as a tuple of cells, header first, in a single pass."""
        it = iter(self.table())
        while True:
            try:
                row = next(it)
            except StopIteration:
                return
            except FileNotFoundError as e:
                raise CsvOpalUserError(
                    "E_INPUT_NOT_FOUND",
                    f"Input file not found: '{self.uri}'.",
                    hint="Check the -i path, or pipe the CSV on standard input.",
                ) from e
            except (OSError, UnicodeDecodeError, csv.Error) as e:
                raise CsvOpalUserError(
                    "E_INPUT_READ",
                    f"Could not read input '{self._name()}': {type(e).__name__}: {e}",
                    hint="Input must be UTF-8, comma separated text.",
                ) from e
            yield tuple(row)

    def _name(self) -> str:
        if self.is_stdin:
            return "<stdin>"
        if isinstance(self.uri, str):
            return self.uri
        return type(self.uri).__name__

    def __str__(self) -> str:
        return f'CsvSource("{self._name()}")'
