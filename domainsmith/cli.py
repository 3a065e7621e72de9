"""CLI interface for domainsmith."""

import json
import click
import logging
import warnings
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing import List, Optional

# Suppress noisy library warnings/errors (socket, whois, dns)
warnings.filterwarnings("ignore")
logging.getLogger("whois").setLevel(logging.CRITICAL)
logging.getLogger("dns").setLevel(logging.CRITICAL)

from .config import DEFAULT_CONFIG_PATH, ClientConfig, load_config
from .models import Availability
from .scoring import DomainScorer, ScoringConfig
from .search import SearchService
from .utils.synonyms import SynonymExpander, ensure_corpora
from .utils.tlds import get_cc_tld


console = Console()

AVAILABILITY_STYLE = {
    Availability.UNREGISTERED: "[green]available[/green]",
    Availability.REGISTERED: "[red]taken[/red]",
    Availability.INVALID: "[red]invalid[/red]",
    Availability.UNSUPPORTED: "[yellow]unsupported[/yellow]",
    Availability.UNKNOWN: "[dim]-[/dim]",
}


def split_list(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [t.strip() for t in value.split(',') if t.strip()]


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)] if verbose else None,
        force=True
    )


@click.group()
@click.version_option(version="0.1.0")
@click.option('--config', 'config_path', default=DEFAULT_CONFIG_PATH, help='Path to YAML config')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
@click.pass_context
def cli(ctx, config_path, verbose):
    """domainsmith - Suggest brandable domain names."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj['config'] = ClientConfig.from_mapping(load_config(config_path))


@cli.command()
@click.argument('query')
@click.option('--tlds', '-t', default=None, help='Supported TLDs to search (comma-separated)')
@click.option('--default-tlds', default=None, help='TLDs always tried first (comma-separated)')
@click.option('--limit', '-n', default=None, type=int, help='Number of results')
@click.option('--offset', default=None, type=int, help='Results to skip')
@click.option('--location', default=None, help='Country name or code for a ccTLD bonus')
@click.option('--hyphenated/--no-hyphenated', default=None, help='Include hyphenated permutations')
@click.option('--check/--no-check', default=None, help='Check availability')
@click.option('--whois/--no-whois', default=False, help='Verify available domains with WHOIS')
@click.option('--output', '-o', default=None, help='Output file (JSON)')
@click.option('--debug', is_flag=True, help='Show score breakdowns and the processed query')
@click.pass_context
def search(ctx, query, tlds, default_tlds, limit, offset, location, hyphenated, check, whois, output, debug):
    """Suggest domains for QUERY."""
    config: ClientConfig = ctx.obj['config']
    if whois:
        config = config.merged(availability={**config.availability, 'verify_with_whois': True})

    service = SearchService(config=config)

    with console.status("[bold green]Generating domains..."):
        response = service.search(
            query,
            debug=debug,
            limit=limit,
            offset=offset,
            supported_tlds=split_list(tlds),
            default_tlds=split_list(default_tlds),
            location=location,
            include_hyphenated=hyphenated,
            check_availability=check,
        )

    if not response.success:
        console.print(f"[red]{response.message}[/red]")
        ctx.exit(1)

    if response.results:
        table = Table(title=f"Domains for '{query}'")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Domain", style="cyan")
        table.add_column("Score", justify="right", style="green")
        table.add_column("Strategy")
        table.add_column("Availability", justify="center")
        if debug:
            table.add_column("Breakdown", style="dim")

        start = (offset or 0) + 1
        for i, cand in enumerate(response.results, start):
            row = [
                str(i),
                cand.domain,
                f"{cand.total:.1f}",
                cand.strategy.value if cand.strategy else "-",
                AVAILABILITY_STYLE[cand.availability],
            ]
            if debug and cand.score:
                row.append(", ".join(f"{k}={v:g}" for k, v in cand.score.components.items()))
            table.add_row(*row)

        console.print(table)
    else:
        console.print("[yellow]No domains generated.[/yellow]")

    meta = response.metadata
    console.print(
        f"\n[bold]Generated:[/bold] {meta.total_generated}  "
        f"[bold]Shown:[/bold] {len(response.results)}  "
        f"[bold]Time:[/bold] {meta.search_time}ms"
    )
    if response.invalid_candidates:
        console.print(f"[dim]Skipped {len(response.invalid_candidates)} unavailable domains[/dim]")
    if debug and response.processed:
        console.print(f"[dim]Tokens: {', '.join(response.processed.tokens)}  "
                      f"TLDs: {', '.join(response.processed.ordered_tlds)}[/dim]")

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(response.to_dict(debug=debug), f, indent=2)
        console.print(f"[green]Saved to {output}[/green]")


@cli.command()
@click.argument('domain')
@click.option('--location', default=None, help='Country name or code for a ccTLD bonus')
@click.pass_context
def score(ctx, domain, location):
    """Score a single domain."""
    config: ClientConfig = ctx.obj['config']
    scoring = ScoringConfig.from_mapping(config.scoring)
    scorer = DomainScorer(config=scoring.override({'tld_weights': {**scoring.tld_weights, **config.tld_weights}}))
    result = scorer.score_domain_name(domain, location_tld=get_cc_tld(location))

    console.print(f"\n[bold]Domain:[/bold] {domain.lower()}")
    console.print(f"[bold green]Total Score:[/bold green] {result.total:.1f}")
    console.print(f"\n[bold]Breakdown:[/bold]")
    for name, value in result.components.items():
        console.print(f"  {name:<26} {value:+g}")


@cli.command()
@click.argument('word')
@click.option('--max', '-n', 'max_count', default=5, help='Maximum related words')
def synonyms(word, max_count):
    """Show the synonym expansion for WORD."""
    words = SynonymExpander().expand(word, max_count + 1)
    if len(words) <= 1:
        console.print(f"[yellow]No related words for '{word}'.[/yellow]")
        return
    console.print(f"[bold]{words[0]}:[/bold] {', '.join(words[1:])}")


@cli.command()
def setup():
    """Download the NLTK corpora used for synonyms and dictionary words."""
    with console.status("[bold green]Downloading NLTK corpora..."):
        ok = ensure_corpora()
    if ok:
        console.print("[green]Corpora installed.[/green]")
    else:
        console.print("[red]Some corpora failed to download; see log output.[/red]")


def main():
    cli()


if __name__ == '__main__':
    main()
