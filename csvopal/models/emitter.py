from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TextIO, Tuple

from csvopal.models.columns import Column, ColumnConfig
from csvopal.util import QUOTE, dequote, is_quoted

log = logging.getLogger(__name__)

JSON_COLUMN = "foo"
VALUE_PATH = f"_c_{JSON_COLUMN}_value"

PREAMBLE = (
    "filter false | statsby count(), group_by()\n"
    f"make_col {JSON_COLUMN}:parse_json(concat_strings('['\n"
)
ROW_LINE = "\t,'%s'\n"
CLOSE = "\t, ']'))\n"
FLATTEN = f"flatten_single {JSON_COLUMN}\n"

Embedder = Callable[[str], str]


def embed_numeric(text: str) -> str:
    # Bare token; non-numeric text goes through as is and fails in OPAL.
    # Empty prints as 0, like printf("%d", "").
    return dequote(text).strip() or "0"


def embed_string(text: str) -> str:
    if is_quoted(text):
        return text
    return QUOTE + text + QUOTE


def _embedder(col: Column) -> Embedder:
    embed = embed_numeric if col.numeric else embed_string
    if col.dequote:
        return lambda text: embed(dequote(text))
    return embed


@dataclass(frozen=True)
class CompiledRow:
    """
    Renders one CSV row as a JSON object fragment.

    `fmt` is a %-template such as `{"x":%s,"z":%s}` with one slot per surviving
    column; `embedders` turn the raw cell of each slot into its JSON token.
    """
    fmt: str
    indexes: Tuple[int, ...]
    embedders: Tuple[Embedder, ...]
    width: int

    def __call__(self, row: Sequence[str]) -> str:
        n = len(row)
        return self.fmt % tuple(
            embed(row[i] if i < n else "") for i, embed in zip(self.indexes, self.embedders)
        )


def compile_row(config: ColumnConfig) -> CompiledRow:
    """Build the row renderer once from the resolved columns."""
    slots = []
    for col in config.columns:
        slots.append('"%s":%%s' % col.label.replace("%", "%%"))
    fmt = "{" + ",".join(slots) + "}"
    compiled = CompiledRow(
        fmt=fmt,
        indexes=tuple(c.index for c in config.columns),
        embedders=tuple(_embedder(c) for c in config.columns),
        width=config.num_input_cols,
    )
    log.debug("compiled row format: %s", fmt)
    return compiled


def row_fragments(config: ColumnConfig, rows: Iterable[Sequence[str]]) -> Iterable[str]:
    """Yield one JSON object fragment per data row, every one after the first comma-prefixed."""
    render = compile_row(config)
    for i, row in enumerate(rows):
        if len(row) < render.width:
            log.debug("row %d has %d of %d field(s); padding with empty values", i + 1, len(row), render.width)
        frag = render(row)
        yield frag if i == 0 else "," + frag


def pick_col_statement(config: ColumnConfig) -> str:
    cols = ",".join(f"{c.label}:{c.cast}({VALUE_PATH}.{c.label})" for c in config.columns)
    return f"pick_col {cols}"


class OpalEmitter:
    """Writes the OPAL script for a resolved column configuration to a text stream."""

    def __init__(self, config: ColumnConfig, out: TextIO):
        self.config = config
        self.out = out

    def write(self, rows: Iterable[Sequence[str]]) -> int:
        """Write the whole script; rows are streamed. Returns the number of data rows."""
        self.out.write(PREAMBLE)
        count = 0
        for frag in row_fragments(self.config, rows):
            self.out.write(ROW_LINE % frag)
            count += 1
        self.out.write(CLOSE)
        self.out.write(FLATTEN)
        self.out.write(pick_col_statement(self.config) + "\n")
        return count
