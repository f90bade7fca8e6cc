# main.py — sitemap crawler CLI
from __future__ import annotations

import sys, time

import click

from checkpoint import FileCheckpointStore, MemoryCheckpointStore
from crawler import SiteCrawler
from errors import CheckpointError, ConfigurationError
from pinger import DEFAULT_ENDPOINTS, Pinger
from settings import (
    DEFAULT_RESTART_DELAY,
    DEFAULT_SAFETY_MARGIN,
    DEFAULT_SESSION,
    DEFAULT_TIMEOUT,
    CrawlSettings,
)
from sitemap_writer import SitemapWriter

EX_TEMPFAIL = 75        # "try again later" for cron / supervisors


def _parse_additional(ctx, param, values: tuple[str, ...]) -> dict[str, float]:
    out: dict[str, float] = {}
    for item in values:
        url, sep, prio = item.rpartition("=")
        if not sep or not url:
            raise click.BadParameter(f"expected URL=PRIORITY, got {item!r}")
        try:
            out[url] = float(prio)
        except ValueError:
            raise click.BadParameter(f"priority must be a number, got {prio!r}")
    return out


@click.group()
def cli() -> None:
    """Crawl a site and build its XML sitemap."""
    pass


@cli.command()
@click.argument("root")
@click.option("-o", "--output", default="sitemap.xml", show_default=True, type=click.Path(dir_okay=False),
              help="Where to write the sitemap.")
@click.option("--limit", default=0, show_default=True, help="Max pages to visit (0 = no limit).")
@click.option("--user", default=None, help="Basic-auth user.")
@click.option("--password", default=None, help="Basic-auth password.")
@click.option("--disabled", multiple=True, help="Path fragment never crawled (repeatable).")
@click.option("--primary", multiple=True, help="Path fragment with priority 1 (repeatable).")
@click.option("--normal", multiple=True, help="Path fragment with priority >= 0.5 (repeatable).")
@click.option("--secondary", multiple=True, help="Path fragment with priority 0 (repeatable).")
@click.option("--query-urls", is_flag=True, help="Also crawl addresses containing '?'.")
@click.option("--additional", multiple=True, callback=_parse_additional, metavar="URL=PRIORITY",
              help="Extra address not linked from the site (repeatable).")
@click.option("--session", default=DEFAULT_SESSION, show_default=True, help="Checkpoint key.")
@click.option("--checkpoint-dir", default=None, type=click.Path(file_okay=False),
              help="Directory for checkpoint files.")
@click.option("--time-budget", default=0.0, show_default=True,
              help="Seconds one run may take before checkpointing (0 = unlimited).")
@click.option("--safety-margin", default=float(DEFAULT_SAFETY_MARGIN), show_default=True,
              help="Seconds kept in reserve before the time budget runs out.")
@click.option("--delay", default=DEFAULT_RESTART_DELAY, show_default=True,
              help="Seconds to wait before a checkpointed crawl resumes.")
@click.option("--timeout", default=float(DEFAULT_TIMEOUT), show_default=True, help="HTTP timeout (seconds).")
@click.option("--throttle", default=0.0, show_default=True, help="Pause between requests (seconds).")
@click.option("--supervise", is_flag=True, help="Resume checkpointed crawls in-process instead of exiting.")
@click.option("--ping", "endpoints", multiple=True, help="Ping URL template containing {path} (repeatable).")
@click.option("--sitemap-url", default=None, help="Public address of the sitemap, used when pinging.")
def build(root: str, output: str, limit: int, user: str | None, password: str | None,
          disabled: tuple[str, ...], primary: tuple[str, ...], normal: tuple[str, ...],
          secondary: tuple[str, ...], query_urls: bool, additional: dict[str, float],
          session: str, checkpoint_dir: str | None, time_budget: float, safety_margin: float,
          delay: int, timeout: float, throttle: float, supervise: bool,
          endpoints: tuple[str, ...], sitemap_url: str | None) -> None:
    """Crawl ROOT and write its sitemap."""
    settings = CrawlSettings(
        url=root, limit=limit, user=user, password=password,
        disabled=disabled, primary=primary, normal=normal, secondary=secondary,
        query_urls=query_urls, additional=additional, session=session,
        delay=delay, time_budget=time_budget, safety_margin=safety_margin,
        timeout=timeout, throttle=throttle,
    )

    if checkpoint_dir:
        store = FileCheckpointStore(checkpoint_dir)
    elif time_budget and supervise:
        store = MemoryCheckpointStore()
    else:
        store = None

    try:
        crawler = SiteCrawler(settings, store=store)
        outcome = crawler.run()
        while not outcome.completed:
            if not supervise:
                click.echo(click.style(
                    f"Checkpoint saved; run again to resume at node {outcome.resume_at}.", fg="yellow"), err=True)
                sys.exit(EX_TEMPFAIL)
            time.sleep(outcome.delay)
            outcome = crawler.run()
        path = SitemapWriter(output).build(outcome.results)
    except ConfigurationError as exc:
        raise click.UsageError(str(exc))
    except CheckpointError as exc:
        click.echo(click.style(f"✗ {exc}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style(f"✓ Wrote {len(outcome.results)} urls to {path}.", fg="green"))

    if endpoints:
        Pinger(sitemap_url or settings.url + path.name).set_urls(endpoints).ping()


@cli.command()
@click.argument("sitemap_url")
@click.option("--endpoint", "endpoints", multiple=True,
              help="Ping URL template containing the placeholder (repeatable).")
@click.option("--placeholder", default="{path}", show_default=True)
def ping(sitemap_url: str, endpoints: tuple[str, ...], placeholder: str) -> None:
    """Notify search engines about SITEMAP_URL."""
    pinger = Pinger(sitemap_url, placeholder=placeholder)
    pinger.set_urls(endpoints or DEFAULT_ENDPOINTS).ping()
    click.echo(click.style(f"✓ Pinged {len(pinger.responses)} endpoints.", fg="green"))


def run() -> None:
    cli(auto_envvar_prefix="SITEMAP")


if __name__ == "__main__":
    run()
