from __future__ import annotations

import os
import pathlib
import re
import unicodedata
from typing import Any, Mapping

import orjson
import yaml


def ensure_dir(p: str | pathlib.Path) -> None:
    pathlib.Path(p).mkdir(parents=True, exist_ok=True)


def slugify(value: str) -> str:
    value = (
        unicodedata.normalize("NFKD", value)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    value = value.lower()
    value = re.sub(r"[^a-z0-9\s-]", "", value)
    value = re.sub(r"\s+", "-", value).strip("-")
    value = re.sub(r"-+", "-", value)
    return value


def read_json(path: str | pathlib.Path) -> Any:
    return orjson.loads(pathlib.Path(path).read_bytes())


def write_json(path: str | pathlib.Path, data) -> None:
    ensure_dir(pathlib.Path(path).parent)
    with open(path, "wb") as f:
        f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))


def dump_json(data) -> str:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")


def read_yaml(path: str | pathlib.Path) -> Any:
    return yaml.safe_load(pathlib.Path(path).read_text(encoding="utf-8"))


def read_env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


def first_key(x: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-empty value, else None."""
    for k in keys:
        if k in x and x[k] not in (None, ""):
            return x[k]
    return None


def first_present(x: Mapping[str, Any], *keys: str) -> Any:
    """Like first_key, but an empty string counts as a value."""
    for k in keys:
        if x.get(k) is not None:
            return x[k]
    return None
