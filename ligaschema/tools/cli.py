from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from typing import Any, Dict, List, Optional, Tuple

from ligaschema.api import (
    AttemptPolicy,
    RetryOptions,
    generate_season_with_retry,
    parse_assignment,
    parse_team_names,
)
from ligaschema.core import (
    DEFAULT_DIVISIONS,
    ConfigError,
    GenerationOptions,
    LeagueConfig,
    Schedule,
    ScheduleError,
    Team,
    check_assignment,
    generate_schedule,
    random_rivalry_pairs,
    schedule_violations,
)
from ligaschema.tools.views import (
    FAIL,
    format_report,
    format_schedule,
    schedule_rows,
    team_rows,
)

DEFAULT_ASSIGNMENT = ",".join("".join(t.value for t in div) for div in DEFAULT_DIVISIONS)


def _print_json(data: Any, pretty: bool = True) -> None:
    if pretty:
        json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    else:
        json.dump(data, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def _generation_options(args: argparse.Namespace) -> GenerationOptions:
    opts = GenerationOptions.from_env()
    if getattr(args, "seed", None) is not None:
        opts.rng = random.Random(args.seed)
    return opts


def _build_config(args: argparse.Namespace) -> LeagueConfig:
    return LeagueConfig.from_assignment(parse_assignment(args.divisions))


def _names(args: argparse.Namespace) -> Dict[Team, str]:
    return parse_team_names(getattr(args, "name", None) or [])


def _generate(args: argparse.Namespace) -> Tuple[Schedule, LeagueConfig]:
    opts = _generation_options(args)
    if getattr(args, "retry", False):
        slots = check_assignment(parse_assignment(args.divisions))
        retry = RetryOptions(policy=AttemptPolicy.from_env(), rng=opts.rng, generation=opts)
        return asyncio.run(generate_season_with_retry(slots, retry))
    config = _build_config(args)
    return generate_schedule(config, opts), config


def cmd_generate(args: argparse.Namespace) -> None:
    schedule, config = _generate(args)
    names = _names(args)
    if args.json:
        _print_json({"ok": True, "weeks": len(schedule), "matches": schedule_rows(schedule)})
        return
    sys.stdout.write(format_schedule(schedule, names))
    sys.stdout.write("\nLag  Namn                 Division      Rival                Hemma  Borta\n")
    for row in team_rows(schedule, config, names):
        sys.stdout.write(
            f"{row.team.value:<4} {row.name:<20} {row.division:<13} {row.rival:<20} "
            f"{row.home:>5} {row.away:>6}\n"
        )


def cmd_validate(args: argparse.Namespace) -> int:
    config = _build_config(args)
    runs = max(1, args.runs)
    opts = _generation_options(args)
    failed = 0
    for run in range(1, runs + 1):
        try:
            schedule = generate_schedule(config, opts)
        except ScheduleError as exc:
            # Obalans och placeringsfel kommer som undantag
            sys.stdout.write(f"Körning {run}:\n  {FAIL} generering: {exc}\n")
            failed += 1
            continue
        report = schedule_violations(schedule, config)
        ok = not any(report.values())
        if not ok or runs == 1:
            sys.stdout.write(f"Körning {run}:\n")
            sys.stdout.write("\n".join(format_report(report)) + "\n")
        if not ok:
            failed += 1
    if failed:
        sys.stdout.write(f"\n{failed} av {runs} körningar bröt mot reglerna.\n")
        return 1
    sys.stdout.write(f"\nAlla kontroller godkända ({runs} körningar).\n")
    return 0


def cmd_rivalries(args: argparse.Namespace) -> None:
    slots = check_assignment(parse_assignment(args.divisions))
    if args.random:
        rng = random.Random(args.seed) if args.seed is not None else None
        config = LeagueConfig.from_assignment(slots, random_rivalry_pairs(slots, rng))
    else:
        config = LeagueConfig.from_assignment(slots)
    names = _names(args)
    data: List[Dict[str, str]] = [
        {"home": names[a], "away": names[b], "pair": f"{a.value}-{b.value}"}
        for a, b in config.rivalry_pairs
    ]
    _print_json(data)


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--divisions",
        default=DEFAULT_ASSIGNMENT,
        help="Divisionsindelning, t.ex. ABC,DEF,GHI,JKL",
    )
    p.add_argument("--seed", type=int)
    p.add_argument("--name", action="append", metavar="LAG=NAMN")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ligaschema", description="Spelschema för 12-lagsliga")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate")
    _add_common(generate)
    generate.add_argument("--retry", action="store_true")
    generate.add_argument("--json", action="store_true")
    generate.set_defaults(func=cmd_generate)

    validate = sub.add_parser("validate")
    _add_common(validate)
    validate.add_argument("--runs", type=int, default=1)
    validate.set_defaults(func=cmd_validate)

    rivalries = sub.add_parser("rivalries")
    _add_common(rivalries)
    rivalries.add_argument("--random", action="store_true")
    rivalries.set_defaults(func=cmd_rivalries)

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return args.func(args) or 0
    except ConfigError as exc:
        _print_json({"ok": False, "error": {"code": "CONFIG_ERROR", "message": str(exc)}})
        return 1
    except ScheduleError as exc:
        _print_json({"ok": False, "error": {"code": "SCHEDULE_ERROR", "message": str(exc)}})
        return 1
    except Exception as exc:  # pragma: no cover - unexpected failure
        _print_json({"ok": False, "error": {"code": "UNEXPECTED_ERROR", "message": str(exc)}})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
