"""CLI entry point — command definitions using Click.

Commands:
    init      Generate a template config file
    scan      Scan a URL through the scan service and build an audit report
    analyze   Build an audit report from a saved scan result (JSON file)
"""

import json
import logging
import sys

import click

from a11y_audit import __version__


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _make_generator(ctx: click.Context, config):
    """Return the configured text generator, or None in offline mode."""
    from a11y_audit.generator import build_generator

    if ctx.obj["offline"]:
        return None
    generator = build_generator(config)
    if ctx.obj["verbose"] and generator is not None:
        click.echo(f"[verbose] Generating requirements with {generator.model}", err=True)
    return generator


def _emit_report(report, ctx: click.Context) -> None:
    """Write the report to stdout or to the file specified by --output."""
    from a11y_audit.reports.text import render_text

    obj = ctx.obj
    if obj["format"] == "text":
        text = render_text(report)
    else:
        indent = 2 if obj["pretty"] else None
        text = json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)

    output_path: str | None = obj["output_path"]
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Report written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _handle_errors(func):
    """Decorator that catches report-generation failures and exits cleanly."""
    import functools

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from a11y_audit.client import ScanFailedError, ScannerError, ScannerNetworkError
        from a11y_audit.config import ConfigError
        from a11y_audit.reports.report import ReportError

        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        except ReportError as exc:
            click.echo(f"Report error: {exc}", err=True)
            sys.exit(1)
        except ScannerNetworkError as exc:
            click.echo(f"Network error: {exc}", err=True)
            sys.exit(1)
        except ScanFailedError as exc:
            click.echo(f"Scan failed: {exc}", err=True)
            sys.exit(1)
        except ScannerError as exc:
            click.echo(f"Scanner error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default="a11y-audit.yaml", show_default=True,
              help="Path to the configuration file.")
@click.option("--output", "output_path", default=None,
              help="Write the report to a file instead of stdout.")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print the JSON output.")
@click.option("--format", "output_format", type=click.Choice(["json", "text"]),
              default="json", show_default=True, help="Report output format.")
@click.option("--offline", is_flag=True, default=False,
              help="Never call the text generator; use rule-based requirements.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="a11y-audit")
@click.pass_context
def cli(ctx: click.Context, config_path: str, output_path: str | None, pretty: bool,
        output_format: str, offline: bool, verbose: bool) -> None:
    """Accessibility audit tool — scan a page, export a triaged audit report."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["output_path"] = output_path
    ctx.obj["pretty"] = pretty
    ctx.obj["format"] = output_format
    ctx.obj["offline"] = offline
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="a11y-audit.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template a11y-audit.yaml file."""
    from a11y_audit.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your scan service URL and text generator settings.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------

@cli.command("scan")
@click.argument("url")
@click.pass_context
@_handle_errors
def scan_command(ctx: click.Context, url: str) -> None:
    """Scan URL with the scan service and build an audit report."""
    from a11y_audit.client import ScannerClient
    from a11y_audit.config import load, require_scanner
    from a11y_audit.reports.report import build_report, validate_url

    config = load(ctx.obj["config_path"])
    url = validate_url(url)
    client = ScannerClient(url=require_scanner(config), timeout=config.scanner.timeout)

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Scanning {url} via {client.base_url}", err=True)

    scan = client.analyze(url)
    report = build_report(url, scan.page_info, scan.results, _make_generator(ctx, config))
    _emit_report(report, ctx)


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------

@cli.command("analyze")
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--url", required=True, help="URL of the page the results belong to.")
@click.pass_context
@_handle_errors
def analyze_command(ctx: click.Context, results_file: str, url: str) -> None:
    """Build an audit report from a saved scan result RESULTS_FILE.

    The file may hold the scan service reply ({"success", "pageInfo",
    "results"}) or bare axe-core results ({"violations", "incomplete"}).
    """
    from a11y_audit.client import ScanResponse
    from a11y_audit.config import load_or_default
    from a11y_audit.reports.report import ReportError, build_report

    config = load_or_default(ctx.obj["config_path"])

    try:
        with open(results_file, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ReportError(f"'{results_file}' is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ReportError(f"'{results_file}' must contain a JSON object")

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Loaded scan results from '{results_file}'", err=True)

    scan = ScanResponse.from_dict(data)
    report = build_report(url, scan.page_info, scan.results, _make_generator(ctx, config))
    _emit_report(report, ctx)
