from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import yaml

from csvopal.errors import CsvOpalUserError
from csvopal.models.options import ColumnOptions
from csvopal.util import dequote

log = logging.getLogger(__name__)

DEFAULT_CAST = "string"

# OPAL casts whose values are embedded as bare JSON numbers.
NUMERIC_CASTS = frozenset({"int64", "from_seconds", "from_milliseconds", "from_nanoseconds"})


def is_numeric_cast(cast: str) -> bool:
    return cast in NUMERIC_CASTS


@dataclass(frozen=True)
class Column:
    number: int  # 1-based, counted before dropping
    label: str
    cast: str = DEFAULT_CAST
    dequote: bool = False

    @property
    def numeric(self) -> bool:
        return is_numeric_cast(self.cast)

    @property
    def index(self) -> int:
        """0-based position in a raw CSV row."""
        return self.number - 1

    def __str__(self) -> str:
        return f"{self.number}:{self.label}:{self.cast}" + (" (dequote)" if self.dequote else "")


@dataclass(frozen=True)
class ColumnConfig:
    """
    Surviving columns in ascending input order, every one with a resolved label and cast.
    """
    num_input_cols: int
    columns: Tuple[Column, ...]

    def __post_init__(self) -> None:
        if not self.columns:
            raise CsvOpalUserError(
                "E_ALL_COLUMNS_DROPPED",
                "Too many columns have been dropped. No work to do!",
                hint=f"The input has {self.num_input_cols} column(s); leave at least one out of -x.",
            )
        numbers = [c.number for c in self.columns]
        if numbers != sorted(set(numbers)):
            raise ValueError(f"columns must be unique and ascending, got {numbers}")

    @property
    def labels(self) -> List[str]:
        return [c.label for c in self.columns]

    def to_ir(self) -> Dict[str, Any]:
        return {
            "num_input_cols": self.num_input_cols,
            "columns": [
                {"number": c.number, "label": c.label, "cast": c.cast, "dequote": c.dequote, "numeric": c.numeric}
                for c in self.columns
            ],
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_ir(), sort_keys=False)


def _warn_out_of_range(what: str, numbers, num_input_cols: int) -> None:
    extra = sorted(n for n in numbers if n > num_input_cols)
    if extra:
        log.warning(
            "%s column(s) %s beyond the %d header column(s) ignored",
            what,
            ",".join(map(str, extra)),
            num_input_cols,
        )


def reconcile_header(options: ColumnOptions, header: Sequence[str]) -> ColumnConfig:
    """Resolve options against the CSV header line.

    - the number of header cells is the number of input columns
    - a column without a label takes its header cell, `"` removed
    - a column without a cast takes `string`
    - dropped columns are left out; at least one must survive
    """
    num_input_cols = len(header)
    if num_input_cols == 0:
        raise CsvOpalUserError(
            "E_NO_HEADER",
            "The input has no header line.",
            hint="The first CSV line must name the columns.",
        )

    _warn_out_of_range("drop", options.drop, num_input_cols)
    _warn_out_of_range("dequote", options.dequote, num_input_cols)
    _warn_out_of_range("label", options.labels, num_input_cols)
    _warn_out_of_range("type", options.types, num_input_cols)

    dropped = sum(1 for n in options.drop if n <= num_input_cols)
    if dropped >= num_input_cols:
        raise CsvOpalUserError(
            "E_ALL_COLUMNS_DROPPED",
            "Too many columns have been dropped. No work to do!",
            hint=f"The input has {num_input_cols} column(s); leave at least one out of -x.",
        )

    columns: List[Column] = []
    for number, cell in enumerate(header, start=1):
        if number in options.drop:
            continue
        label = options.labels.get(number) or dequote(cell)
        columns.append(
            Column(
                number=number,
                label=label,
                cast=options.types.get(number) or DEFAULT_CAST,
                dequote=number in options.dequote,
            )
        )

    config = ColumnConfig(num_input_cols=num_input_cols, columns=tuple(columns))
    if log.isEnabledFor(logging.DEBUG):
        log.debug("resolved columns:\n%s", config.to_yaml().rstrip())
    return config
