"""Command-line interface for ssdlife."""

import argparse
import json
import sys
from pathlib import Path

from ssdlife import __version__
from ssdlife.aggregator import evaluate
from ssdlife.core.config import ConfigError, load_config
from ssdlife.core.context import Context
from ssdlife.core.logging import LOG_LEVELS, open_logger, query_logs
from ssdlife.core.output import Output
from ssdlife.models import Report, Severity


SEVERITY_CHOICES = [s.value for s in Severity]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ssdlife",
        description="Project remaining SSD lifetime from wear telemetry",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ssdlife {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: ./.ssdlife.yaml)",
    )
    parser.add_argument("-w", "--warn-months", type=int, metavar="MONTHS",
                        help="Warn below this many months left (default: 6)")
    parser.add_argument("-c", "--crit-months", type=int, metavar="MONTHS",
                        help="Critical below this many months left (default: 3)")
    parser.add_argument("--warn-percent", type=float, metavar="PERCENT",
                        help="Warn at or below this wear remaining")
    parser.add_argument("--crit-percent", type=float, metavar="PERCENT",
                        help="Critical at or below this wear remaining")
    parser.add_argument("--no-ssd-severity", choices=SEVERITY_CHOICES,
                        help="Status when no SSDs are present (default: ok)")
    parser.add_argument("--unsupported-severity", choices=SEVERITY_CHOICES,
                        help="Status for an SSD without wear data (default: unknown)")
    parser.add_argument("--timeout", type=int, dest="command_timeout",
                        metavar="SECONDS",
                        help="Timeout per tool invocation (default: 30)")
    parser.add_argument("--sudo", action="store_true", dest="use_sudo",
                        default=None, help="Run diagnostic tools with sudo -n")
    parser.add_argument("--log-dir", type=Path,
                        help="Write JSONL run logs under this directory")
    parser.add_argument("--history", action="store_true",
                        help="Print today's logged entries and exit")
    parser.add_argument("--level", choices=list(LOG_LEVELS), default="debug",
                        help="Lowest log level shown by --history")
    parser.add_argument("--limit", type=int, metavar="N",
                        help="Show at most N entries with --history")
    parser.add_argument("--format", choices=["plain", "json"], default="plain")
    return parser


def report_to_output(report: Report, output: Output) -> None:
    """Copy a report into the output helper."""
    output.emit(report.to_dict())
    if report.findings:
        output.emit({"table": report.table()})
    output.set_summary(report.summary())


def cmd_history(
    log_dir: Path | None,
    fmt: str,
    min_level: str = "debug",
    limit: int | None = None,
) -> int:
    """Print today's log entries."""
    if log_dir is None:
        print("No log directory configured (use --log-dir)", file=sys.stderr)
        return Severity.UNKNOWN.exit_code

    for entry in query_logs(log_dir, min_level=min_level, limit=limit):
        if fmt == "json":
            print(json.dumps(entry))
        else:
            print(f"{entry.get('timestamp', '')} [{entry.get('level', '')}] "
                  f"{entry.get('message', '')}")
    return 0


def main(argv: list[str] | None = None, context: Context | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    overrides = {
        "warn_months": args.warn_months,
        "crit_months": args.crit_months,
        "warn_percent": args.warn_percent,
        "crit_percent": args.crit_percent,
        "no_ssd_severity": args.no_ssd_severity,
        "unsupported_severity": args.unsupported_severity,
        "command_timeout": args.command_timeout,
        "use_sudo": args.use_sudo,
        "log_dir": args.log_dir,
    }
    try:
        config = load_config(args.config, overrides)
    except ConfigError as e:
        print(f"SSDLIFE UNKNOWN - {e}", file=sys.stderr)
        return Severity.UNKNOWN.exit_code

    if args.history:
        return cmd_history(config.log_dir, args.format, args.level, args.limit)

    with open_logger(config.log_dir) as logger:
        report = evaluate(context or Context(), config, logger)

    output = Output()
    report_to_output(report, output)
    output.render(args.format)
    return report.severity.exit_code


if __name__ == "__main__":
    sys.exit(main())
