from csvopal.models.columns import Column, ColumnConfig, reconcile_header
from csvopal.models.emitter import OpalEmitter, compile_row
from csvopal.models.options import ColumnOptions
from csvopal.models.pipeline import Pipeline
from csvopal.models.sources import CsvSource
from csvopal.errors import CsvOpalUserError

__all__ = [
    "Column",
    "ColumnConfig",
    "ColumnOptions",
    "CsvOpalUserError",
    "CsvSource",
    "OpalEmitter",
    "Pipeline",
    "compile_row",
    "reconcile_header",
]
