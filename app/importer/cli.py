"""
Command-line entry point for the import jobs.
"""

import sys

import click

from core.config import DB_PATH, SHOW_IMAGES_DIR, SHOWS_JSON_PATH
from importer.errors import ImportAbortedError, ImportFileError
from importer.import_shows import import_shows
from importer.scan_images import match_image_filenames


@click.group()
def cli():
    """Build and maintain the shows catalog database."""


@cli.command("import-shows")
@click.option("--json", "json_path", default=SHOWS_JSON_PATH, show_default=True)
@click.option("--db", "db_path", default=DB_PATH, show_default=True)
def import_shows_command(json_path, db_path):
    """Rebuild the database from the JSON dataset."""
    try:
        import_shows(json_path, db_path)
    except (ImportFileError, ImportAbortedError) as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)


@cli.command("match-images")
@click.option("--json", "json_path", default=SHOWS_JSON_PATH, show_default=True)
@click.option("--images", "image_dir", default=SHOW_IMAGES_DIR, show_default=True)
def match_images_command(json_path, image_dir):
    """Fill missing image filenames in the JSON dataset."""
    try:
        match_image_filenames(json_path, image_dir)
    except ImportFileError as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)
