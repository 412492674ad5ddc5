"""
CLI entrypoint for the Cyberstats category engine.

Sub-commands:
- validate: load configs/site.yaml, the taxonomy and legacy redirects; fail on conflicts
- resolve: print what a slug path resolves to
- redirect: print the permanent redirect for a request path, if any
- category: route a /categories request against fetched items and print the page model
- vendor: print the vendor index, or one vendor page
- sitemap: print every sitemap entry
- coverage: write taxonomy coverage tables (CSV) under outputs/
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel

from application import (
    build_sitemap,
    build_vendor_index,
    build_vendor_page,
    serve_category_request,
)
from application.constants import COVERAGE_FILENAME, LOG_FILENAME, OUTPUT_ROOT, UNTRACKED_TAGS_FILENAME
from domain.errors import RedirectConfigError, TaxonomyValidationError
from domain.reporting import compute_coverage_tables_and_save
from domain.schemas import TaggedItem
from domain.site import Site
from infrastructure.config import SiteConfig, load_site, load_site_config
from infrastructure.constants import SITE_FILE
from infrastructure.io import ensure_exists, write_json
from infrastructure.observability import configure_logging, make_run_tag, set_log_context
from infrastructure.sources import StatsSourceError, make_source

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Cyberstats category taxonomy, redirects and page models")
    p.add_argument(
        "--config",
        type=str,
        default=str(SITE_FILE),
        help="Path to site.yaml (default: configs/site.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file (default: .env; skipped if missing)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=LOG_LEVELS,
        help="Console log level",
    )
    p.add_argument(
        "--log-file",
        type=str,
        default=None,
        help=f"Also write DEBUG logs to this file (e.g. {OUTPUT_ROOT / LOG_FILENAME})",
    )

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("validate", help="Load and validate taxonomy and legacy redirects")

    p_resolve = sub.add_parser("resolve", help="Resolve a slug path such as 'identity-access/mfa'")
    p_resolve.add_argument("slug_path")

    p_redirect = sub.add_parser("redirect", help="Show the permanent redirect for a request path")
    p_redirect.add_argument("request_path")

    p_category = sub.add_parser("category", help="Route a /categories request and print the page model")
    p_category.add_argument("request_path")
    p_category.add_argument("--snapshot", type=str, default=None, help="Read items from this file")
    p_category.add_argument("--limit", type=int, default=None, help="Items to fetch (default from config)")

    p_vendor = sub.add_parser("vendor", help="Print the vendor index, or one vendor page")
    p_vendor.add_argument("slug", nargs="?", default=None)
    p_vendor.add_argument("--days", type=int, default=None, help="Only items from the last N days")
    p_vendor.add_argument("--snapshot", type=str, default=None, help="Read items from this file")

    p_sitemap = sub.add_parser("sitemap", help="Print sitemap entries")
    p_sitemap.add_argument("--snapshot", type=str, default=None, help="Read items from this file")
    p_sitemap.add_argument("--output", type=str, default=None, help="Write entries to this JSON file instead of stdout")

    p_coverage = sub.add_parser("coverage", help="Write taxonomy coverage and untracked-tag tables")
    p_coverage.add_argument("--snapshot", type=str, default=None, help="Read items from this file")
    p_coverage.add_argument("--output", type=str, default=None, help="Output directory (default: outputs/<run>)")
    p_coverage.add_argument("--min-count", type=int, default=1, help="Minimum items for an untracked tag")

    return p.parse_args(argv)


def _dump(payload: Any) -> None:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    elif isinstance(payload, list):
        payload = [p.model_dump(mode="json") if isinstance(p, BaseModel) else p for p in payload]
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _snapshot_path(args: argparse.Namespace) -> Path | None:
    if getattr(args, "snapshot", None) is None:
        return None
    path = Path(args.snapshot)
    ensure_exists(path, "snapshot file")
    return path


def _fetch_all(cfg: SiteConfig, args: argparse.Namespace) -> list[TaggedItem]:
    with make_source(cfg, snapshot=_snapshot_path(args)) as source:
        return source.fetch_items(limit=cfg.fetch_limit)


def _cmd_validate(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    taxonomy = site.taxonomy
    _dump(
        {
            "categories": len(taxonomy.categories),
            "subcategories": sum(len(c.subcategories) for c in taxonomy.categories),
            "known_slugs": len(site.resolver.known_slugs()),
            "legacy_redirects": len(site.redirects.legacy_redirects),
            "category_overrides": len(site.category_overrides),
        }
    )
    return 0


def _cmd_resolve(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    resolved = site.resolver.resolve_by_slug_path(args.slug_path)
    if resolved is None:
        logger.warning("No category for slug path %r", args.slug_path)
        _dump({"slug_path": args.slug_path, "resolved": None})
        return 1
    payload = resolved.model_dump(mode="json")
    payload["canonical_path"] = resolved.canonical_path
    _dump(payload)
    return 0


def _cmd_redirect(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    target = site.redirects.decide_redirect(args.request_path)
    if target is None:
        print("no redirect")
        return 0
    _dump(target)
    return 0


def _cmd_category(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    limit = args.limit or cfg.category_fetch_limit
    with make_source(cfg, snapshot=_snapshot_path(args)) as source:
        result = serve_category_request(
            site,
            source,
            args.request_path,
            limit=limit,
            min_count=cfg.category_min_count,
        )
    _dump(result)
    return 0


def _cmd_vendor(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    items = _fetch_all(cfg, args)
    if args.slug is None:
        _dump(build_vendor_index(items))
        return 0
    page = build_vendor_page(args.slug, items, days=args.days)
    if page is None:
        logger.warning("No vendor with slug %r", args.slug)
        return 1
    _dump(page)
    return 0


def _cmd_sitemap(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    entries = build_sitemap(site, _fetch_all(cfg, args))
    if args.output is None:
        _dump(entries)
        return 0
    path = write_json(Path(args.output), [e.model_dump(mode="json") for e in entries])
    logger.info("Saved %d sitemap entries to %s", len(entries), path)
    return 0


def _cmd_coverage(cfg: SiteConfig, site: Site, args: argparse.Namespace) -> int:
    items = _fetch_all(cfg, args)
    if args.output is not None:
        output_dir = Path(args.output)
    else:
        output_dir = OUTPUT_ROOT / f"coverage_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    coverage_path, untracked_path = compute_coverage_tables_and_save(
        taxonomy=site.taxonomy,
        items=items,
        output_dir=output_dir,
        coverage_filename=COVERAGE_FILENAME,
        untracked_filename=UNTRACKED_TAGS_FILENAME,
        min_count=args.min_count,
    )
    logger.info("Saved taxonomy coverage table to %s", coverage_path)
    logger.info("Saved untracked tags table to %s", untracked_path)
    return 0


COMMANDS = {
    "validate": _cmd_validate,
    "resolve": _cmd_resolve,
    "redirect": _cmd_redirect,
    "category": _cmd_category,
    "vendor": _cmd_vendor,
    "sitemap": _cmd_sitemap,
    "coverage": _cmd_coverage,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    configure_logging(
        log_file=Path(args.log_file) if args.log_file else None,
        console_level=getattr(logging, args.console_level),
    )

    run_id = f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{args.command}"
    set_log_context(run_id_full=run_id, request_path=getattr(args, "request_path", None))
    logger.debug("Starting command: %s (run_tag=%s)", args.command, make_run_tag(run_id))

    config_path = Path(args.config)
    ensure_exists(config_path, "site.yaml")
    cfg = load_site_config(config_path)
    set_log_context(source=cfg.source.value)

    try:
        site = load_site(cfg)
    except TaxonomyValidationError as e:
        for problem in e.problems:
            logger.error("Taxonomy problem: %s", problem)
        return 2
    except RedirectConfigError as e:
        for src, dst, nxt in e.chains:
            logger.error("Redirect chain: %s -> %s -> %s", src, dst, nxt)
        return 2

    try:
        return COMMANDS[args.command](cfg, site, args)
    except StatsSourceError as e:
        logger.error("Stats source failed (status=%s): %s", e.status_code, e)
        return 3


if __name__ == "__main__":
    sys.exit(main())
