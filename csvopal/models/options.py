from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

import yaml

from csvopal.errors import CsvOpalUserError
from csvopal.schema import _normalize_ir, _options_to_ir
from csvopal.util import parse_column_numbers, parse_indexed_list

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnOptions:
    """
    Column selection requested by the user, keyed by 1-based input column number.

    Built once from the command line (optionally on top of an options file) and
    never mutated afterwards; the header decides how many columns there are.
    """
    drop: FrozenSet[int] = frozenset()
    dequote: FrozenSet[int] = frozenset()
    labels: Dict[int, str] = field(default_factory=dict)
    types: Dict[int, str] = field(default_factory=dict)
    debug: bool = False

    @classmethod
    def from_flags(
        cls,
        *,
        drop: Optional[str] = None,
        dequote: Optional[str] = None,
        labels: Optional[str] = None,
        types: Optional[str] = None,
        debug: bool = False,
        base: Optional["ColumnOptions"] = None,
    ) -> "ColumnOptions":
        """Fold raw flag values into options.

        A flag left as None keeps the value from `base` (e.g. an options file);
        a flag that is given replaces it entirely.
        """
        opts = base or cls()
        changes: Dict[str, Any] = {}
        if drop is not None:
            changes["drop"] = parse_column_numbers(drop)
        if dequote is not None:
            changes["dequote"] = parse_column_numbers(dequote)
        if labels is not None:
            changes["labels"] = parse_indexed_list(labels)
        if types is not None:
            changes["types"] = parse_indexed_list(types)
        if debug:
            changes["debug"] = True
        return replace(opts, **changes)

    def to_ir(self) -> Dict[str, Any]:
        return _options_to_ir(self)

    @classmethod
    def from_ir(cls, ir: Any) -> "ColumnOptions":
        return cls(**_normalize_ir(ir))

    def to_yaml(self, path: Optional[Union[str, Path]] = None) -> str:
        """Dump options to a YAML string. If `path` is provided, also write the file."""
        text = yaml.safe_dump(self.to_ir(), sort_keys=False)
        if path is not None:
            Path(path).write_text(text, encoding="utf-8")
        return text

    @classmethod
    def from_yaml(cls, text: str) -> "ColumnOptions":
        try:
            ir = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CsvOpalUserError(
                "E_CONFIG_PARSE",
                f"Failed to parse options YAML: {e}",
                hint="Check indentation and quoting.",
            ) from e
        return cls.from_ir(ir)

    @classmethod
    def load_yaml(cls, path: Union[str, Path]) -> "ColumnOptions":
        """Load options from a YAML file."""
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CsvOpalUserError(
                "E_CONFIG_NOT_FOUND",
                f"Options file not found: '{p}'.",
                hint="Check the -c path.",
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise CsvOpalUserError(
                "E_CONFIG_READ",
                f"Could not read options file '{p}': {type(e).__name__}: {e}",
            ) from e
        opts = cls.from_yaml(text)
        log.debug("loaded options from %s: %s", p, opts)
        return opts

    def __str__(self) -> str:
        parts = [
            f"drop={sorted(self.drop)}",
            f"dequote={sorted(self.dequote)}",
            f"labels={dict(sorted(self.labels.items()))}",
            f"types={dict(sorted(self.types.items()))}",
        ]
        return "ColumnOptions(" + ", ".join(parts) + ")"
