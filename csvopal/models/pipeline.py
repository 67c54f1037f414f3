from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from csvopal.errors import CsvOpalUserError
from csvopal.models.columns import ColumnConfig, reconcile_header
from csvopal.models.emitter import OpalEmitter
from csvopal.models.options import ColumnOptions
from csvopal.models.sources import CsvSource

log = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    config: Optional[ColumnConfig] = None
    header: List[str] = field(default_factory=list)
    rows: int = 0


@dataclass
class Pipeline:
    """
    CSV -> OPAL in one forward pass: header, then every data row in input order.
    """
    source: CsvSource
    options: ColumnOptions = field(default_factory=ColumnOptions)

    def __str__(self) -> str:
        return f"Pipeline(source={self.source})\n  -> {self.options}"

    def run(self, out: TextIO) -> PipelineContext:
        ctx = PipelineContext()
        log.debug("options: %s", self.options)

        rows = self.source.rows()
        header = next(rows, None)
        if header is None:
            raise CsvOpalUserError(
                "E_NO_HEADER",
                f"The input {self.source} is empty.",
                hint="The first CSV line must name the columns.",
            )
        ctx.header = list(header)

        # Configuration errors surface here, before anything is written.
        ctx.config = reconcile_header(self.options, header)

        ctx.rows = OpalEmitter(ctx.config, out).write(rows)
        log.debug("emitted %d row(s)", ctx.rows)
        return ctx
