#!/usr/bin/env python3
"""Data Mapper - Entry point."""
import logging
import sys
from pathlib import Path

import click
from colorama import Fore, Style, init

from config import app_config
from datamapper import __version__
from datamapper.cli.report_printer import ReportPrinter
from datamapper.exceptions import MappingError
from datamapper.exporter.json_exporter import JsonExporter
from datamapper.mapper.engine import DataMapper, MapOptions
from datamapper.parser.config_parser import ConfigParser
from datamapper.parser.loader import DocumentLoader
from datamapper.sensitivity.detector import SensitiveFieldDetector

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}", err=True)
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Data Mapper{Fore.CYAN}                          ║", err=True)
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Declarative Document Mapping{Fore.CYAN}         ║", err=True)
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}", err=True)


def build_mapper() -> DataMapper:
    return DataMapper(
        config_loader=DocumentLoader(app_config.config_dir, app_config.http_timeout),
        data_loader=DocumentLoader(app_config.data_dir, app_config.http_timeout),
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Data Mapper - Map source documents to target documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else app_config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command(name="map")
@click.argument("config_ref")
@click.argument("data_ref")
@click.option(
    "--dry-run/--apply",
    default=app_config.dry_run,
    help="Suppress target writes (the report is still produced)",
)
@click.option(
    "--report/--target",
    "json_output",
    default=app_config.json_output,
    help="Output the dry-run report instead of the target document",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write the payload to this file instead of stdout",
)
@click.option("--quiet", "-q", is_flag=True, help="Do not print the report table")
def map_command(config_ref, data_ref, dry_run, json_output, output, quiet):
    """Map DATA_REF using the configuration CONFIG_REF."""
    options = MapOptions(dry_run=dry_run, json_dry_run_output=json_output)

    try:
        result = build_mapper().run(config_ref, data_ref, options)
    except MappingError as e:
        click.echo(f"{Fore.RED}❌ {e}", err=True)
        sys.exit(1)

    if not quiet:
        print_banner()
        ReportPrinter(err=True).print_report(result.report)

    payload = result.payload(options)
    exporter = JsonExporter()

    if output:
        exporter.export(Path(output), payload)
        click.echo(f"{Fore.GREEN}✅ Payload written to {output}", err=True)
    else:
        click.echo(exporter.dumps(payload))


@cli.command()
@click.argument("config_ref")
def validate(config_ref):
    """Validate a mapping configuration."""
    loader = DocumentLoader(app_config.config_dir, app_config.http_timeout)

    try:
        config = ConfigParser().parse(loader.load(config_ref))
    except MappingError as e:
        click.echo(f"{Fore.RED}❌ {e}")
        sys.exit(1)

    collections = sum(1 for rule in config.mappings if rule.is_collection)
    click.echo(f"{Fore.GREEN}✅ Configuration is valid")
    click.echo(f"   Contexts: {len(config.contexts)}")
    click.echo(f"   Rules: {len(config.mappings)} ({collections} collection)")


@cli.command()
@click.argument("fields", nargs=-1, required=True)
def classify(fields):
    """Report which FIELDS are treated as sensitive."""
    for name in fields:
        if SensitiveFieldDetector.is_sensitive(name):
            kind = "email" if SensitiveFieldDetector.is_email_field(name) else "sensitive"
            click.echo(f"{Fore.RED}{name}: {kind}")
        else:
            click.echo(f"{Fore.GREEN}{name}: not sensitive")


if __name__ == "__main__":
    cli()
