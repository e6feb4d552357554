"""
Command-line interface for the RDAP lookup client.

This module provides the main CLI entry point with commands for:
- query: Look up a domain and print one view of the response
- resolve: Show which RDAP server a domain resolves to
- bootstrap: Inspect or refresh the cached IANA bootstrap registry
"""

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import Callable, Optional

import httpx

from . import __version__
from .audit_logger import AuditLogger, create_logger
from .bootstrap_cache import BootstrapCache
from .config import (
    ClientConfig,
    LoggingConfig,
    ProxyAuth,
    ProxyConfig,
    config_to_dict,
    load_config_from_file,
)
from .domain_validator import DomainValidator
from .enums import OutputView
from .exceptions import ConfigurationError, RDAPLookupError
from .models import RDAPDocument
from .normalizer import format_response, parse_contact, to_iso8601
from .reachability import domain_exists, site_is_reachable
from .rdap_client import RDAPClient
from .server_resolver import ServerResolver

SEPARATOR = "─" * 29


def _header(title: str) -> str:
    return f"\n• {title}"


def render_formatted(document: RDAPDocument) -> str:
    return "\n".join([_header("Formatted Response"), format_response(document)])


def render_raw(document: RDAPDocument) -> str:
    return "\n".join([
        _header("Raw Response"),
        json.dumps(document.raw or document.to_dict(), indent=2, ensure_ascii=False),
    ])


def render_nameservers(document: RDAPDocument) -> str:
    if not document.nameservers:
        return "No nameservers found."
    lines = [_header("Nameservers")]
    lines.extend(f"  - {ns.ldh_name}" for ns in document.nameservers)
    return "\n".join(lines)


def render_key_info(document: RDAPDocument) -> str:
    status = ", ".join(document.status) if document.status else "Unknown"
    return "\n".join([
        _header("Key Information"),
        f"Domain: {document.ldh_name}",
        f"Status: {status}",
    ])


def render_contacts(document: RDAPDocument) -> str:
    if not document.entities:
        return "No contacts found."
    lines = [_header("Contacts")]
    for entity in document.entities:
        roles = ", ".join(entity.roles) if entity.roles else "Unknown"
        lines.append(f"  {roles}: {parse_contact(entity).display_name()}")
    return "\n".join(lines)


def render_events(document: RDAPDocument) -> str:
    if not document.events:
        return "No events found."
    lines = [_header("Events")]
    for event in document.events:
        lines.append(f"  {event.event_action}: {to_iso8601(event.event_date)}")
    return "\n".join(lines)


VIEW_RENDERERS: dict[OutputView, Callable[[RDAPDocument], str]] = {
    OutputView.FORMATTED: render_formatted,
    OutputView.RAW: render_raw,
    OutputView.NAMESERVERS: render_nameservers,
    OutputView.KEY_INFO: render_key_info,
    OutputView.CONTACTS: render_contacts,
    OutputView.EVENTS: render_events,
}


def render_view(view: OutputView, document: RDAPDocument) -> str:
    """Render one view of a document, framed by separator lines."""
    return "\n".join([SEPARATOR, VIEW_RENDERERS[view](document), SEPARATOR])


def parse_proxy(value: str) -> tuple[str, int]:
    """Split a HOST:PORT proxy argument."""
    host, sep, port = value.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ConfigurationError(
            code="invalid_proxy",
            message=f"Proxy must be HOST:PORT, got: {value}",
            details={"proxy": value},
        )
    return host, int(port)


def build_client_config(args: argparse.Namespace) -> ClientConfig:
    """
    Build the client configuration from an optional file plus flags.

    Flags given on the command line override values from the file.

    Raises:
        ConfigurationError: If the file or a flag is invalid
    """
    config = load_config_from_file(Path(args.config)) if args.config else ClientConfig()

    overrides: dict = {}
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout
    if args.retries is not None:
        overrides["max_retries"] = args.retries
    if args.retry_delay is not None:
        overrides["retry_delay_seconds"] = args.retry_delay
    if args.no_randomize:
        overrides["randomize_headers"] = False
    if args.proxy:
        host, port = parse_proxy(args.proxy)
        auth = None
        if args.proxy_user:
            auth = ProxyAuth(username=args.proxy_user, password=args.proxy_password or "")
        overrides["proxy"] = ProxyConfig(host=host, port=port, auth=auth)

    return dataclasses.replace(config, **overrides) if overrides else config


def _make_logger(args: argparse.Namespace) -> AuditLogger:
    level = "debug" if args.verbose else "warn"
    return create_logger(LoggingConfig(level=level, output_format=args.log_format))


def _make_cache(args: argparse.Namespace, logger: Optional[AuditLogger], proxy: Optional[str] = None) -> BootstrapCache:
    path = Path(args.cache_path) if args.cache_path else None
    return BootstrapCache(path=path, proxy=proxy, logger=logger)


async def run_query(
    domain: str,
    view: OutputView,
    config: ClientConfig,
    cache: BootstrapCache,
    logger: Optional[AuditLogger] = None,
    rdap_url: Optional[str] = None,
    skip_checks: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """
    Validate, check and look up a domain, then print the selected view.

    Returns:
        Exit code (0 on success, 1 on any failure)
    """
    try:
        clean_domain = DomainValidator().clean(domain)
    except RDAPLookupError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    if not skip_checks:
        print(f"Checking domain {clean_domain}...")
        if not await domain_exists(clean_domain) or not await site_is_reachable(clean_domain):
            print(f"Domain {clean_domain} not found or unreachable.", file=sys.stderr)
            return 1
        print(f"Domain {clean_domain} resolved successfully.")

    try:
        async with RDAPClient(
            config=config, cache=cache, logger=logger, transport=transport,
        ) as client:
            document = await client.query_domain(clean_domain, rdap_url=rdap_url)
    except RDAPLookupError as e:
        print(f"❌ Error: {e.message}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print(f"Fetched data for {clean_domain}.\n")
    print(render_view(view, document))
    return 0


async def run_resolve(domain: str, cache: BootstrapCache, logger: Optional[AuditLogger] = None) -> int:
    try:
        clean_domain = DomainValidator().clean(domain)
        resolved = await ServerResolver(cache, logger=logger).resolve(clean_domain)
    except RDAPLookupError as e:
        print(f"❌ Error: {e.message}", file=sys.stderr)
        return 1

    print(resolved.url)
    if resolved.is_fallback:
        print(f"⚠️ No RDAP server found for .{resolved.tld}, using fallback IANA", file=sys.stderr)
    return 0


async def run_bootstrap(cache: BootstrapCache, refresh: bool = False) -> int:
    try:
        registry = await (cache.refresh() if refresh else cache.load())
    except RDAPLookupError as e:
        print(f"❌ Error: {e.message}", file=sys.stderr)
        return 1

    age = cache.age_seconds()
    print(f"Cache file: {cache.path}")
    print(f"Age: {age:.0f}s" if age is not None else "Age: not cached")
    print(f"Services: {len(registry.get('services', []))}")
    if registry.get("publication"):
        print(f"Publication: {registry['publication']}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Handle the 'query' command."""
    try:
        config = build_client_config(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    logger = _make_logger(args)
    logger.debug("cli", "Client configuration", config_to_dict(config))
    proxy = config.proxy.to_url() if config.proxy else None
    return asyncio.run(run_query(
        domain=args.domain,
        view=OutputView(args.view),
        config=config,
        cache=_make_cache(args, logger, proxy),
        logger=logger,
        rdap_url=args.rdap_url,
        skip_checks=args.skip_checks,
    ))


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the 'resolve' command."""
    logger = _make_logger(args)
    return asyncio.run(run_resolve(args.domain, _make_cache(args, logger), logger))


def cmd_bootstrap(args: argparse.Namespace) -> int:
    """Handle the 'bootstrap' command."""
    logger = _make_logger(args)
    return asyncio.run(run_bootstrap(_make_cache(args, logger), refresh=args.refresh))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--cache-path",
        help="Bootstrap cache file (default: .rdap-tld-cache.json in the working directory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json", "both"],
        default="text",
        help="Log output format (default: text)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="rdap-lookup",
        description="Query the RDAP server responsible for a domain",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'query' command
    query_parser = subparsers.add_parser(
        "query",
        help="Look up registration data for a domain",
    )
    query_parser.add_argument(
        "domain",
        help="Domain to query (e.g., example.com)",
    )
    query_parser.add_argument(
        "--view",
        choices=[view.value for view in OutputView],
        default=OutputView.FORMATTED.value,
        help="What to print (default: formatted)",
    )
    query_parser.add_argument(
        "--rdap-url",
        help="Query this RDAP URL instead of resolving one",
    )
    query_parser.add_argument(
        "--skip-checks",
        action="store_true",
        help="Skip the DNS and HTTP reachability checks",
    )
    query_parser.add_argument(
        "--config", "-c",
        help="Path to a JSON configuration file",
    )
    query_parser.add_argument(
        "--timeout",
        type=float,
        help="Per-attempt timeout in seconds (default: 30)",
    )
    query_parser.add_argument(
        "--retries",
        type=int,
        help="Maximum number of retries (default: 3)",
    )
    query_parser.add_argument(
        "--retry-delay",
        type=float,
        help="Base retry delay in seconds, doubled per attempt (default: 1)",
    )
    query_parser.add_argument(
        "--no-randomize",
        action="store_true",
        help="Send static headers instead of randomized ones",
    )
    query_parser.add_argument(
        "--proxy",
        help="Outbound proxy as HOST:PORT",
    )
    query_parser.add_argument(
        "--proxy-user",
        help="Proxy username",
    )
    query_parser.add_argument(
        "--proxy-password",
        help="Proxy password",
    )
    _add_common_arguments(query_parser)
    query_parser.set_defaults(func=cmd_query)

    # 'resolve' command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show the RDAP URL a domain resolves to",
    )
    resolve_parser.add_argument(
        "domain",
        help="Domain to resolve (e.g., example.com)",
    )
    _add_common_arguments(resolve_parser)
    resolve_parser.set_defaults(func=cmd_resolve)

    # 'bootstrap' command
    bootstrap_parser = subparsers.add_parser(
        "bootstrap",
        help="Inspect or refresh the cached IANA bootstrap registry",
    )
    bootstrap_parser.add_argument(
        "--refresh",
        action="store_true",
        help="Fetch the registry even if the cache is fresh",
    )
    _add_common_arguments(bootstrap_parser)
    bootstrap_parser.set_defaults(func=cmd_bootstrap)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
