"""Console rendering of mapping reports."""
import click
from colorama import Fore, Style

from datamapper.schema.report import Action, DryRunReport

ACTION_COLORS = {
    Action.SET: Fore.GREEN,
    Action.SKIPPED: Fore.YELLOW,
    Action.ERROR: Fore.RED,
}


class ReportPrinter:
    """Prints a DryRunReport as a coloured table and coverage summary."""

    def __init__(self, err: bool = False):
        """
        Initialize printer

        Args:
            err: Write to stderr, keeping stdout free for the JSON payload
        """
        self.err = err

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}", err=self.err)
        click.echo(f"{Fore.CYAN}{title}", err=self.err)
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n", err=self.err)

    def print_report(self, report: DryRunReport):
        mode = "DRY RUN" if report.dry_run else "APPLY"
        self.print_header(f"Mapping Report ({mode}) - {report.config_used}")

        for entry in report.mappings:
            color = ACTION_COLORS[entry.action]
            line = f"{color}{entry.action.value:<8}{Style.RESET_ALL} {entry.source_path} → {entry.target_field}"
            if entry.action == Action.SET:
                value = entry.transformed_value
                lock = " 🔒" if entry.is_sensitive else ""
                line += f" = {value}{lock}"
            elif entry.reason_if_skipped:
                line += f" ({entry.reason_if_skipped})"
            click.echo(line, err=self.err)

        self.print_coverage(report)

    def print_coverage(self, report: DryRunReport):
        coverage = report.coverage
        if coverage.total_mappings and coverage.applied == coverage.total_mappings:
            color = Fore.GREEN
        elif coverage.applied:
            color = Fore.YELLOW
        else:
            color = Fore.RED

        click.echo(f"\n{color}Coverage: {coverage.coverage_percent}%{Style.RESET_ALL}", err=self.err)
        click.echo(f"   Total:   {coverage.total_mappings}", err=self.err)
        click.echo(f"   Applied: {coverage.applied}", err=self.err)
        click.echo(f"   Skipped: {coverage.skipped}", err=self.err)
