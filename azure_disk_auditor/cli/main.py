#!/usr/bin/env python3
"""Command-line interface for Azure Disk Auditor"""

import sys
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.table import Table

from .. import __version__
from ..core.auditor import DiskAuditor
from ..core.models import AuditResult, MigrationPriority
from ..report.csv_writer import write_csv
from ..report.excel import write_excel_summary
from ..utils.config import ConfigurationLoader, create_sample_config
from ..utils.logger import setup_logger, set_log_level

app = typer.Typer(
    name="azure-disk-auditor",
    help="💽 Azure tenant-wide disk and migration audit",
    add_completion=False
)

console = Console()

PRIORITY_STYLES = {
    MigrationPriority.HIGH.value: 'red',
    MigrationPriority.MEDIUM.value: 'yellow',
    MigrationPriority.NONE.value: 'green',
}


def _prompt_tenant(tenant_id: Optional[str]) -> str:
    while not tenant_id or not tenant_id.strip():
        tenant_id = typer.prompt("Enter the Tenant ID")
    return tenant_id.strip()


@app.command()
def audit(
    tenant_id: Optional[str] = typer.Option(
        None, "--tenant", "-t",
        help="Tenant ID to audit (prompted for when omitted)"
    ),
    max_workers: Optional[int] = typer.Option(
        None, "--workers", "-w",
        help="Number of subscriptions collected in parallel (default 5)"
    ),
    csv_path: Optional[str] = typer.Option(
        None, "--csv",
        help="Full disk audit CSV path"
    ),
    excel_path: Optional[str] = typer.Option(
        None, "--excel",
        help="Summary workbook path"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c",
        help="YAML configuration file"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    )
):
    """💽 Audit every VM, VMSS and managed disk in a tenant"""

    set_log_level("DEBUG" if verbose else "INFO")
    logger = setup_logger("AzureDiskAuditor")

    try:
        config = ConfigurationLoader().load_configuration(
            config_file,
            tenant_id=tenant_id,
            max_workers=max_workers,
            csv_path=csv_path,
            excel_path=excel_path,
        )
        config.tenant_id = _prompt_tenant(config.tenant_id)

        console.print(f"\n🚀 Starting disk audit for tenant {config.tenant_id}...\n")

        auditor = DiskAuditor(config)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed} subscriptions"),
            console=console
        ) as progress:
            task = progress.add_task("Collecting subscriptions...", total=None)
            result = auditor.run(on_subscription_done=lambda sub: progress.advance(task))

        write_csv(result.records, config.csv_path)
        write_excel_summary(result.records, config.excel_path)

        display_audit_summary(result)
        console.print(f"📁 Disk audit exported to: {config.csv_path}", style="green")
        console.print(f"📊 Summary workbook exported to: {config.excel_path}", style="green")

    except KeyboardInterrupt:
        console.print("\n❌ Audit cancelled by user.", style="red")
        sys.exit(130)
    except Exception as e:
        logger.debug("Audit failed", exc_info=True)
        console.print(f"\n❌ Audit failed: {e}", style="red")
        if verbose:
            console.print_exception()
        sys.exit(1)


@app.command()
def list_subscriptions(
    tenant_id: Optional[str] = typer.Option(
        None, "--tenant", "-t",
        help="Tenant ID (prompted for when omitted)"
    )
):
    """📋 List subscriptions of a tenant"""

    from ..auth.manager import AuthenticationManager

    try:
        auth_manager = AuthenticationManager(_prompt_tenant(tenant_id))
        auth_manager.authenticate()
        subscriptions = auth_manager.get_subscriptions(include_disabled=True)

        if not subscriptions:
            console.print("❌ No accessible subscriptions found.", style="red")
            return

        table = Table(title=f"Subscriptions in tenant {auth_manager.tenant_id}")
        table.add_column("Subscription Name", style="cyan")
        table.add_column("Subscription ID", style="magenta")
        table.add_column("State", style="green")

        for sub in subscriptions:
            table.add_row(sub.name, sub.id, sub.state)

        console.print(table)
        console.print(f"\n📊 Total: {len(subscriptions)} subscriptions")

    except Exception as e:
        console.print(f"❌ Failed to list subscriptions: {e}", style="red")
        sys.exit(1)


@app.command()
def init_config(
    output_file: str = typer.Argument(
        "azure_disk_auditor.yml",
        help="Where to write the sample configuration"
    )
):
    """🧩 Write a sample YAML configuration file"""

    try:
        create_sample_config(output_file)
        console.print(f"📝 Sample configuration created: {output_file}", style="green")
    except OSError as e:
        console.print(f"❌ Failed to create sample configuration: {e}", style="red")
        sys.exit(1)


@app.command()
def version():
    """📝 Show version information"""

    version_info = {
        "Azure Disk Auditor": __version__,
        "Python": sys.version.split()[0],
        "Platform": sys.platform
    }

    panel_content = "\n".join([f"{k}: {v}" for k, v in version_info.items()])
    console.print(Panel(panel_content, title="Version Information", expand=False))


def display_audit_summary(result: AuditResult):
    """Display audit results summary"""

    stats = result.statistics
    summary_content = f"""
🔍 Audit ID: {result.audit_id}
🏢 Tenant: {result.tenant_id}
⏱️  Duration: {result.duration_seconds:.2f} seconds
📋 Subscriptions: {len(result.subscriptions)}
💽 Disks: {stats.get('total_disks', 0)} ({stats.get('total_size_gb', 0):,} GB)
"""
    if result.warnings:
        summary_content += f"⚠️  Warnings: {len(result.warnings)}"

    console.print(Panel(summary_content, title="📋 Audit Summary", expand=False))

    by_priority = stats.get('by_migration_priority', {})
    if by_priority:
        table = Table(title="🎯 Migration Priority")
        table.add_column("Priority", style="cyan")
        table.add_column("Disks", justify="right")

        for priority, style in PRIORITY_STYLES.items():
            if priority in by_priority:
                table.add_row(f"[{style}]{priority}[/{style}]", str(by_priority[priority]))

        console.print(table)

    if result.warnings:
        console.print("\n⚠️  Lookups that degraded to Unknown:", style="yellow")
        for warning in result.warnings[:5]:
            console.print(f"  • {warning}", style="yellow")
        if len(result.warnings) > 5:
            console.print(f"  ... and {len(result.warnings) - 5} more warnings")


def main():
    """Main entry point"""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n❌ Interrupted by user.", style="red")
        sys.exit(130)


if __name__ == "__main__":
    main()
