"""Command line interface for the field mapping engine."""
import json
from pathlib import Path
from typing import Tuple

import click
from colorama import Fore, Style, init

from tradein_mapping import __version__
from tradein_mapping.builder.field_builder import transform_data
from tradein_mapping.builder.payload_builder import PayloadBuilder
from tradein_mapping.builder.record_builder import build_template_data
from tradein_mapping.builder.template_engine import apply_template
from tradein_mapping.config import app_config, configure_logging
from tradein_mapping.exporter.json_exporter import JsonExporter
from tradein_mapping.mapper.mapping import MappingType
from tradein_mapping.mapper.seeder import ensure_default_mappings
from tradein_mapping.store.json_store import JsonMappingStore

# Initialize colorama
init(autoreset=True)

MAPPING_TYPES = click.Choice([t.value for t in MappingType])


def print_header(title: str):
    """Print a section header."""
    click.echo(f"\n{Fore.CYAN}{'━' * 45}")
    click.echo(f"{Fore.CYAN}{title}")
    click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")


def parse_data_pairs(pairs: Tuple[str, ...]) -> dict:
    """key=value pairs; values are parsed as JSON when possible."""
    data = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got {pair!r}")
        key, raw = pair.split("=", 1)
        try:
            data[key.strip()] = json.loads(raw)
        except ValueError:
            data[key.strip()] = raw
    return data


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--store",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the JSON mapping store",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, store, verbose):
    """Trade-in field mapping tool - seed, inspect and apply mapping rules."""
    configure_logging("DEBUG" if verbose else app_config.log_level)
    ctx.obj = JsonMappingStore(store or app_config.store_path)


@cli.command()
@click.pass_obj
def seed(store):
    """Add the missing default mappings to the store."""
    print_header("Seed Default Mappings")

    try:
        added = ensure_default_mappings(store)
    except Exception as e:
        click.echo(f"{Fore.RED}Seeding failed: {e}")
        raise SystemExit(1)

    if not added:
        click.echo(f"{Fore.GREEN}✅ All default mappings are present")
        return

    for rule in added:
        click.echo(
            f"{Fore.GREEN}+ [{rule.mapping_type.value}] "
            f"{rule.source_field} → {rule.target_field} (order {rule.sort_order})"
        )
    click.echo(f"\n{Fore.GREEN}✅ Added {len(added)} mappings")


@cli.command("list")
@click.option("--type", "mapping_type", type=MAPPING_TYPES, default=None, help="Only this mapping type")
@click.option("--all", "show_all", is_flag=True, help="Include inactive mappings")
@click.pass_obj
def list_mappings(store, mapping_type, show_all):
    """List mapping rules."""
    print_header("Field Mappings")

    if show_all:
        rules = store.fetch_all_mappings()
        if mapping_type:
            rules = [r for r in rules if r.mapping_type.value == mapping_type]
    else:
        rules = store.fetch_active_mappings(mapping_type)

    if not rules:
        click.echo(f"{Fore.YELLOW}No mappings found")
        return

    for rule in rules:
        icon = "✓" if rule.is_active else "✗"
        template = f"  {Fore.WHITE}{rule.transform_template}" if rule.transform_template else ""
        click.echo(
            f"{icon} {rule.mapping_type.value:9s} {rule.sort_order:3d}  "
            f"{rule.source_field} → {Fore.YELLOW}{rule.target_field}{Style.RESET_ALL}{template}"
        )


@cli.command()
@click.argument("template")
@click.option("--data", "-d", "pairs", multiple=True, help="Template variable as key=value")
def preview(template, pairs):
    """Render TEMPLATE against the given variables."""
    data = parse_data_pairs(pairs)
    click.echo(apply_template(template, data))


@cli.command()
@click.argument("record_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--type", "mapping_type", type=MAPPING_TYPES, default="product", help="Mapping type to apply")
@click.option("--payload", is_flag=True, help="Build the full product payload")
@click.option("--raw", is_flag=True, help="RECORD_FILE holds item/card/trade_in rows, not a template record")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Export to a JSON file")
@click.pass_obj
def transform(store, record_file, mapping_type, payload, raw, output):
    """Apply the active mappings to the record(s) in RECORD_FILE."""
    try:
        with open(record_file, "r") as f:
            records = json.load(f)
    except ValueError as e:
        click.echo(f"{Fore.RED}Invalid JSON in {record_file}: {e}")
        raise SystemExit(1)

    if isinstance(records, dict):
        records = [records]

    if raw:
        records = [
            build_template_data(
                r.get("item", {}),
                r.get("card"),
                r.get("trade_in"),
                r.get("customer_name", "Unknown"),
            )
            for r in records
        ]

    rules = store.fetch_active_mappings()

    if payload:
        builder = PayloadBuilder(app_config.payload.to_defaults())
        results = builder.build_batch(records, rules)
    else:
        results = [transform_data(record, mapping_type, rules) for record in records]

    if output:
        JsonExporter().export(Path(output), results, rules)
        click.echo(f"{Fore.GREEN}✅ Exported {len(results)} records to {output}")
    else:
        click.echo(json.dumps(results if len(results) != 1 else results[0], indent=2, default=str))


if __name__ == "__main__":
    cli()
