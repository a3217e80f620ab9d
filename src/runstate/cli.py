"""
Command-line interface for runstate.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .aggregator import Aggregator
from .config import ConfigurationError, StateConfig, load_config, validate_config
from .events import load_event_log
from .exceptions import EventLogError
from .models import RunningEntry, Status, StatusCount
from .notifications import LoggingNotifier
from .reporting import ConsoleReporter, JSONReporter
from .replay import EventReplayer

logger = logging.getLogger(__name__)


def _entry_dict(entry: RunningEntry) -> dict:
    return {"adapter": entry.adapter, "position_id": entry.position_id}


def _answer_running(
    aggregator: Aggregator, query: Optional[str], fuzzy: bool, as_json: bool
) -> None:
    """Print the running-set, or the entry matching ``query``, then exit."""
    if query:
        entry = aggregator.query_running(query, fuzzy=fuzzy)
        if entry is None:
            click.echo(f"Not running: {query}", err=True)
            sys.exit(1)
        entries = [entry]
    else:
        entries = aggregator.query_running(as_list=True)

    if as_json:
        click.echo(json.dumps([_entry_dict(e) for e in entries], indent=2))
    elif not entries:
        click.echo("Nothing running")
    else:
        for e in entries:
            click.echo(f"{e.position_id} ({e.adapter or 'unknown adapter'})")
    sys.exit(0)


def _answer_status(
    aggregator: Aggregator,
    query: Optional[str],
    status: Optional[str],
    fuzzy: bool,
    total: bool,
    as_json: bool,
) -> None:
    """Print the count record (or single count) answering a status query, then exit."""
    answer = aggregator.query_status(query, status=status, fuzzy=fuzzy, total=total)
    if answer is None:
        click.echo(f"No status recorded for: {query}", err=True)
        sys.exit(1)

    if isinstance(answer, StatusCount):
        if as_json:
            click.echo(json.dumps(answer.as_dict(), indent=2))
        else:
            click.echo(ConsoleReporter(show_running=False).format_count(answer))
    else:
        click.echo(str(answer))
    sys.exit(0)


@click.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--query",
    type=str,
    help="Position id (with --running) or file path to look up",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in Status]),
    help="Report only the count of this status",
)
@click.option(
    "--fuzzy",
    is_flag=True,
    help="Match keys containing, or contained in, the query",
)
@click.option(
    "--total",
    is_flag=True,
    help="Answer with the total across all paths",
)
@click.option(
    "--running",
    is_flag=True,
    help="Query the running positions instead of status counts",
)
@click.option(
    "--report-format",
    type=click.Choice(["console", "json"]),
    help="Report format (overrides config)",
)
@click.option(
    "--output",
    type=click.Path(),
    help="Output file for report (default: stdout)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides config)",
)
def main(
    events_file: str,
    config: Optional[str],
    query: Optional[str],
    status: Optional[str],
    fuzzy: bool,
    total: bool,
    running: bool,
    report_format: Optional[str],
    output: Optional[str],
    log_level: Optional[str],
) -> None:
    """
    runstate - Aggregate test run state from a recorded engine event log.

    Examples:

      # Summarize a recorded session
      runstate events.yaml

      # Counts for one file
      runstate events.yaml --query tests/test_api.py

      # Failed tests anywhere under a directory
      runstate events.yaml --query tests/api --fuzzy --status failed

      # What is still running
      runstate events.yaml --running

      # JSON report written to a file
      runstate events.yaml --report-format json --output state.json
    """
    logging.basicConfig(
        level=getattr(logging, log_level or "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    try:
        state_config: StateConfig = load_config(config)

        if report_format:
            state_config.report_format = report_format
        if log_level:
            state_config.log_level = log_level
        if fuzzy:
            state_config.fuzzy = True

        errors = validate_config(state_config)
        if errors:
            click.echo("Configuration errors:", err=True)
            for error in errors:
                click.echo(f"  - {error}", err=True)
            sys.exit(1)

        logging.getLogger().setLevel(getattr(logging, state_config.log_level))

        log = load_event_log(events_file)
        aggregator = EventReplayer(log, notifier=LoggingNotifier()).run()
        as_json = state_config.report_format == "json"

        if running:
            _answer_running(aggregator, query, state_config.fuzzy, as_json)
        if query or total or status:
            # A bare --status is answered from the total
            _answer_status(
                aggregator,
                query,
                status,
                state_config.fuzzy,
                total or not query,
                as_json,
            )

        summary = aggregator.summary()
        if as_json:
            reporter = JSONReporter(show_running=state_config.show_running)
        else:
            reporter = ConsoleReporter(show_running=state_config.show_running)

        report = reporter.generate(summary)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(report)
            click.echo(f"Report written to: {output}")
        else:
            click.echo(report)

        logger.info(
            "Replay complete: %d passed, %d failed, %d skipped",
            summary.total.passed,
            summary.total.failed,
            summary.total.skipped,
        )

        sys.exit(0 if summary.success else 1)

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except EventLogError as e:
        logger.error("Event log error: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
