from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping

from csvopal.errors import CsvOpalUserError
from csvopal.util import parse_column_number, parse_column_numbers, parse_indexed_list

IR_VERSION = 0
IR_KEYS = ("csvopal", "drop", "dequote", "labels", "types", "debug")


def _options_to_ir(opts: Any) -> Dict[str, Any]:
    """Serialize column options to a YAML-friendly mapping. Empty entries are omitted."""
    d: Dict[str, Any] = {"csvopal": IR_VERSION}
    if opts.drop:
        d["drop"] = sorted(opts.drop)
    if opts.dequote:
        d["dequote"] = sorted(opts.dequote)
    if opts.labels:
        d["labels"] = {k: opts.labels[k] for k in sorted(opts.labels)}
    if opts.types:
        d["types"] = {k: opts.types[k] for k in sorted(opts.types)}
    if opts.debug:
        d["debug"] = True
    return d


def _columns_from_ir(key: str, value: Any) -> FrozenSet[int]:
    if value is None:
        return frozenset()
    if isinstance(value, int) and not isinstance(value, bool):
        return parse_column_numbers([value])
    if isinstance(value, (str, list)):
        return parse_column_numbers(value)
    raise CsvOpalUserError(
        "E_CONFIG_VALUE",
        f"Options '{key}' must be a list of column numbers or a comma separated string.",
        hint=f"Example: {key}: [1, 3]",
    )


def _indexed_from_ir(key: str, value: Any) -> Dict[int, str]:
    if value is None:
        return {}
    if isinstance(value, str):
        return parse_indexed_list(value)
    if isinstance(value, list):
        tokens: List[str] = []
        for v in value:
            if v is None:
                tokens.append("")
            elif isinstance(v, (str, int, float)) and not isinstance(v, bool):
                tokens.append(str(v))
            else:
                raise CsvOpalUserError(
                    "E_CONFIG_VALUE",
                    f"Options '{key}' list entries must be strings, got {type(v).__name__}.",
                    hint=f"Example: {key}: [vf, vt, '4:last']",
                )
        return parse_indexed_list(",".join(tokens))
    if isinstance(value, Mapping):
        out: Dict[int, str] = {}
        for k, v in value.items():
            if not isinstance(v, str):
                raise CsvOpalUserError(
                    "E_CONFIG_VALUE",
                    f"Options '{key}' entry for column {k!r} must be a string.",
                    hint=f"Example: {key}: {{1: vf, 4: last}}",
                )
            out[parse_column_number(k, what=f"column number in '{key}'")] = v
        return out
    raise CsvOpalUserError(
        "E_CONFIG_VALUE",
        f"Options '{key}' must be a string, a list or a mapping.",
        hint=f"Example: {key}: '1:vf,2:vt'",
    )


def _normalize_ir(ir: Any) -> Dict[str, Any]:
    """Validate an options mapping and parse it into column sets and column maps.

    Guarantees:
      - returns a dict with keys: drop, dequote, labels, types, debug
      - drop/dequote are frozensets of 1-based column numbers
      - labels/types are {column number: name}, dual syntax already resolved
      - keys absent from the input are absent from the result

    A missing or empty document is an empty set of options.
    """
    if ir is None:
        return {}
    if not isinstance(ir, Mapping):
        raise CsvOpalUserError(
            "E_CONFIG_ROOT",
            "Options file must be a mapping at the root.",
            hint="Expected keys: " + ", ".join(IR_KEYS),
        )

    unknown = [k for k in ir if k not in IR_KEYS]
    if unknown:
        raise CsvOpalUserError(
            "E_CONFIG_KEY",
            f"Unknown options key(s): {', '.join(map(str, unknown))}.",
            hint="Supported keys: " + ", ".join(IR_KEYS),
        )

    version = ir.get("csvopal", IR_VERSION)
    if version is None:
        version = IR_VERSION
    if version != IR_VERSION:
        raise CsvOpalUserError(
            "E_CONFIG_VERSION",
            f"Unsupported options version: {version!r}.",
            hint=f"Supported: csvopal: {IR_VERSION}",
        )

    out: Dict[str, Any] = {}
    for key in ("drop", "dequote"):
        if key in ir:
            out[key] = _columns_from_ir(key, ir[key])
    for key in ("labels", "types"):
        if key in ir:
            out[key] = _indexed_from_ir(key, ir[key])
    if "debug" in ir:
        if not isinstance(ir["debug"], bool):
            raise CsvOpalUserError(
                "E_CONFIG_VALUE",
                "Options 'debug' must be true or false.",
                hint="Example: debug: true",
            )
        out["debug"] = ir["debug"]
    return out
