"""Command-line interface for the R2 uploader."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config.settings import UploaderConfig
from .exceptions import ConfigurationError, FileSyncError, LedgerSaveError
from .sync.models import SyncReport
from .sync.upload_manager import UploadManager
from .utils.file_utils import FileHelper
from .utils.logging import setup_logging

console = Console()


@click.command()
@click.version_option(version=__version__)
@click.argument('directory', required=False, type=click.Path(path_type=Path))
@click.option('--config', '-c',
              type=click.Path(exists=True, path_type=Path),
              help='Path to an optional YAML configuration file')
@click.option('--ledger',
              type=click.Path(path_type=Path),
              help='Path to the upload ledger (default: hash.bin)')
@click.option('--max-concurrency',
              type=click.IntRange(min=0),
              help='Maximum files processed at once (0 for no limit)')
@click.option('--dry-run', '-d',
              is_flag=True,
              help='Show what would be uploaded without actually doing it')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Console log level')
@click.option('--log-file',
              type=click.Path(path_type=Path),
              help='Also write a rotating log file here')
def cli(directory: Optional[Path], config: Optional[Path], ledger: Optional[Path],
        max_concurrency: Optional[int], dry_run: bool, log_level: Optional[str],
        log_file: Optional[Path]):
    """Upload DIRECTORY (default: ./book) to a Cloudflare R2 bucket.

    Only files whose content was never uploaded before are sent. Credentials
    and the bucket come from CF_ACCOUNT_ID, CF_ACCESS_KEY_ID,
    CF_SECRET_ACCESS_KEY and CF_BUCKET_NAME.
    """
    try:
        uploader_config = UploaderConfig.from_yaml(config) if config else UploaderConfig.from_env()
        if directory is not None:
            uploader_config.source_dir = str(directory)
        if ledger is not None:
            uploader_config.sync_options.ledger_path = str(ledger)
        if max_concurrency is not None:
            uploader_config.sync_options.max_concurrency = max_concurrency
        if log_level:
            uploader_config.log_level = log_level
        if log_file:
            uploader_config.log_file = str(log_file)

        uploader_config.require_bucket()
    except ConfigurationError as e:
        console.print(f"❌ {escape(str(e))}", style="red bold")
        sys.exit(1)
    except Exception as e:
        console.print(f"❌ Error loading configuration: {escape(str(e))}", style="red bold")
        sys.exit(1)

    setup_logging(
        log_level=uploader_config.log_level,
        log_file=uploader_config.log_file,
    )

    if dry_run:
        console.print("🔍 DRY RUN MODE - No files will be uploaded", style="yellow bold")

    manager = UploadManager(uploader_config)
    try:
        report = asyncio.run(manager.run(dry_run=dry_run))
    except LedgerSaveError as e:
        console.print(f"❌ {escape(str(e))}", style="red bold")
        console.print("   Files were uploaded, but the next run will not know about them.",
                      style="red")
        sys.exit(1)
    except FileSyncError as e:
        console.print(f"❌ Upload failed for {escape(e.key)}: {escape(str(e))}", style="red bold")
        sys.exit(1)
    except Exception as e:
        console.print(f"❌ Upload failed: {escape(str(e))}", style="red bold")
        sys.exit(1)

    _display_report(report)
    console.print("✅ Upload completed successfully!", style="green bold")


def _display_report(report: SyncReport):
    """Display sync results in a table."""
    table = Table(title=f"Upload Results: {report.root} → {report.bucket}")
    table.add_column("Files Processed", justify="right")
    table.add_column("Uploaded" if not report.dry_run else "Would Upload",
                     justify="right", style="green")
    table.add_column("Skipped (duplicate)", justify="right", style="yellow")
    table.add_column("Skipped (empty)", justify="right", style="yellow")
    table.add_column("Data Transferred", justify="right")
    table.add_column("Duration", justify="right")

    table.add_row(
        str(report.files_processed),
        str(report.files_planned if report.dry_run else report.files_uploaded),
        str(report.files_skipped_duplicate),
        str(report.files_skipped_empty),
        FileHelper.format_file_size(report.bytes_transferred),
        f"{report.duration:.1f}s",
    )
    console.print(table)

    if report.ledger_saved:
        rprint("💾 Upload ledger saved")


if __name__ == '__main__':
    cli()
