from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import Any, List, Optional

from .config import load_config
from .grouping import group_running_order, sort_fan_zone
from .logging_setup import setup_logging
from .migrate import build_document
from .normalise import ensure_fan_zone_schedule
from .present import present_items
from .utils import dump_json, read_json, write_json
from .validate import has_errors, validate_document, validate_fan_zone

logger = logging.getLogger(__name__)


def _emit(data: Any, out: Optional[str]) -> None:
    if out:
        write_json(out, data)
        logger.info("wrote %s", out)
    else:
        sys.stdout.write(dump_json(data) + "\n")


def migrate_cmd(args: argparse.Namespace, cfg: dict) -> int:
    raw = read_json(args.input)
    doc = build_document(raw)
    logger.info("migrated %s to dataVersion %d", args.input, doc.data_version)
    _emit(doc.dump(), args.output)
    return 0


def order_cmd(args: argparse.Namespace, cfg: dict) -> int:
    doc = build_document(read_json(args.input)).dump()
    items = present_items(doc, cfg)
    groups = group_running_order(items, doc["categories"])
    payload = [
        {"id": g.category["id"], "name": g.category["name"], "items": g.items}
        for g in groups
    ]
    logger.info("%d categories, %d items displayed", len(payload), sum(len(g.items) for g in groups))
    _emit(payload, args.output)
    return 0


def fanzone_cmd(args: argparse.Namespace, cfg: dict) -> int:
    schedule = ensure_fan_zone_schedule(read_json(args.input) if args.input else None)
    payload = schedule.dump()
    payload["items"] = [it.dump() for it in sort_fan_zone(schedule)]
    _emit(payload, args.output)
    return 0


def validate_cmd(args: argparse.Namespace, cfg: dict) -> int:
    raw = read_json(args.input)
    issues = validate_fan_zone(raw) if args.fan_zone else validate_document(raw, cfg)
    for issue in issues:
        ref = f" [{issue.ref}]" if issue.ref else ""
        print(f"{issue.level}: {issue.code}{ref} {issue.message}")
    if has_errors(issues):
        return 1
    print("ok")
    return 0


COMMANDS = {
    "migrate": migrate_cmd,
    "order": order_cmd,
    "fanzone": fanzone_cmd,
    "validate": validate_cmd,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="running-order", description="Matchday running order tools")
    parser.add_argument("--config", help="YAML config overriding the bundled defaults")
    parser.add_argument("--log-level", help="override the configured log level")
    parser.add_argument("--log-file", type=pathlib.Path)
    sub = parser.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("migrate", help="canonicalise a saved document")
    p.add_argument("input")
    p.add_argument("-o", "--output")

    p = sub.add_parser("order", help="resolve tokens and group the running order for print")
    p.add_argument("input")
    p.add_argument("-o", "--output")

    p = sub.add_parser("fanzone", help="normalise and sort a fan zone schedule")
    p.add_argument("input", nargs="?", help="schedule JSON; the bundled non-matchday schedule when omitted")
    p.add_argument("-o", "--output")

    p = sub.add_parser("validate", help="report unrecognised times, dangling categories, missing token values")
    p.add_argument("input")
    p.add_argument("--fan-zone", action="store_true", help="input is a fan zone schedule")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)
    setup_logging(args.log_level or cfg.get("log_level", "INFO"), args.log_file)
    code = COMMANDS[args.cmd](args, cfg)
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
