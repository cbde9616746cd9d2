"""Command-line interface for hibpkit.

CLI for breach, paste, password, subscription and stealer log lookups.
"""

import argparse
import asyncio
import getpass
import sys

import structlog

from hibpkit import __version__
from hibpkit.client import HIBPClient
from hibpkit.config import get_settings
from hibpkit.exceptions import HIBPError
from hibpkit.models import Breach

# Configure structlog for simple console output
structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.BoundLogger,
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

# Pwned Passwords does not need an API key
KEYLESS_COMMANDS = {"password", "range"}


def get_logger(name: str):
    """Get a structured logger."""
    return structlog.get_logger(name)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hibpkit",
        description="hibpkit: Have I Been Pwned API client",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--rpm",
        type=int,
        default=None,
        help="Pace requests at this many per minute (default: HIBP_RPM)",
    )
    parser.add_argument(
        "--auto-rate-limit",
        action="store_true",
        help="Pace requests at the rpm of the API key's subscription",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    breaches_parser = subparsers.add_parser("breaches", help="Breaches for an account")
    breaches_parser.add_argument("account", help="Email address or username")
    breaches_parser.add_argument(
        "--verified-only",
        action="store_true",
        help="Exclude unverified breaches",
    )

    breach_parser = subparsers.add_parser("breach", help="A single breach by name")
    breach_parser.add_argument("name", help="Breach name (e.g., Adobe)")

    subparsers.add_parser("latest", help="Most recently added breach")

    all_parser = subparsers.add_parser("all-breaches", help="All breaches in the system")
    all_parser.add_argument("--domain", default=None, help="Only breaches of this domain")

    pastes_parser = subparsers.add_parser("pastes", help="Pastes for an account")
    pastes_parser.add_argument("account", help="Email address")

    password_parser = subparsers.add_parser("password", help="Check a password (k-anonymity)")
    password_parser.add_argument("--padded", action="store_true", help="Request padding")
    password_parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the password from stdin instead of prompting",
    )

    range_parser = subparsers.add_parser("range", help="Hash suffixes for a 5-char prefix")
    range_parser.add_argument("prefix", help="First 5 characters of a SHA-1 hash")
    range_parser.add_argument("--padded", action="store_true", help="Request padding")

    subparsers.add_parser("subscription", help="Subscription status of the API key")
    subparsers.add_parser("domains", help="Domains subscribed for domain search")

    stealer_parser = subparsers.add_parser("stealer", help="Stealer log lookups")
    stealer_parser.add_argument(
        "kind",
        choices=["emails", "aliases", "domains"],
        help="emails/aliases take a domain, domains takes an email",
    )
    stealer_parser.add_argument("value", help="Domain or email address")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return asyncio.run(run_command(args, get_logger(args.command)))


async def create_client(args: argparse.Namespace) -> HIBPClient:
    """Create a client from settings and command-line overrides."""
    settings = get_settings()
    config = settings.to_client_config(
        rpm=args.rpm,
        require_api_key=args.command not in KEYLESS_COMMANDS,
    )
    if config.rpm is None and (args.auto_rate_limit or settings.auto_rate_limit):
        return await HIBPClient.with_auto_rate_limit(config)
    return HIBPClient(config)


async def run_command(args: argparse.Namespace, log) -> int:
    """Run one subcommand, mapping library errors to exit code 1."""
    try:
        client = await create_client(args)
        async with client:
            await COMMANDS[args.command](client, args, log)
    except HIBPError as e:
        log.error("Command failed", command=args.command, error=str(e))
        return 1
    return 0


def _log_breach(log, breach: Breach) -> None:
    log.info(
        breach.title,
        name=breach.name,
        domain=breach.domain,
        breach_date=breach.breach_date,
        pwn_count=breach.pwn_count,
        passwords=breach.exposed_passwords,
    )


async def cmd_breaches(client: HIBPClient, args: argparse.Namespace, log) -> None:
    breaches = await client.get_breaches_for_account(
        args.account,
        include_unverified=not args.verified_only,
    )
    log.info("Breaches found", account=args.account, count=len(breaches))
    for breach in breaches:
        _log_breach(log, breach)


async def cmd_breach(client: HIBPClient, args: argparse.Namespace, log) -> None:
    _log_breach(log, await client.get_breach_by_name(args.name))


async def cmd_latest(client: HIBPClient, args: argparse.Namespace, log) -> None:
    _log_breach(log, await client.get_latest_breach())


async def cmd_all_breaches(client: HIBPClient, args: argparse.Namespace, log) -> None:
    breaches = await client.get_all_breaches(domain=args.domain)
    log.info("Breaches in system", count=len(breaches), domain=args.domain)
    for breach in breaches:
        _log_breach(log, breach)


async def cmd_pastes(client: HIBPClient, args: argparse.Namespace, log) -> None:
    pastes = await client.get_pastes_for_account(args.account)
    log.info("Pastes found", account=args.account, count=len(pastes))
    for paste in pastes:
        log.info(paste.title or paste.id, source=paste.source, date=paste.date)


async def cmd_password(client: HIBPClient, args: argparse.Namespace, log) -> None:
    if args.stdin:
        password = sys.stdin.readline().rstrip("\r\n")
    else:
        password = getpass.getpass("Password: ")

    if args.padded:
        count = await client.check_password_padded(password)
    else:
        count = await client.check_password(password)

    if count:
        log.warning("Password has been pwned", occurrences=count)
    else:
        log.info("Password not found in Pwned Passwords")


async def cmd_range(client: HIBPClient, args: argparse.Namespace, log) -> None:
    if args.padded:
        entries = await client.search_password_range_padded(args.prefix)
    else:
        entries = await client.search_password_range(args.prefix)

    padding = sum(1 for e in entries if e.is_padding)
    log.info("Range fetched", prefix=args.prefix, entries=len(entries), padding=padding)
    for entry in entries:
        if not entry.is_padding:
            log.info(entry.hash_suffix, count=entry.count)


async def cmd_subscription(client: HIBPClient, args: argparse.Namespace, log) -> None:
    status = await client.get_subscription_status()
    log.info(
        "Subscription",
        name=status.subscription_name,
        rpm=status.rpm,
        subscribed_until=status.subscribed_until,
        stealer_logs=status.includes_stealer_logs,
    )


async def cmd_domains(client: HIBPClient, args: argparse.Namespace, log) -> None:
    domains = await client.get_all_subscribed_domains()
    log.info("Subscribed domains", count=len(domains))
    for domain in domains:
        log.info(domain.domain_name, added=domain.date_added, expires=domain.date_expires)


async def cmd_stealer(client: HIBPClient, args: argparse.Namespace, log) -> None:
    if args.kind == "emails":
        values = [e.email for e in await client.get_stealer_log_emails_for_domain(args.value)]
    elif args.kind == "aliases":
        values = [a.alias for a in await client.get_stealer_log_aliases_for_domain(args.value)]
    else:
        values = [d.domain for d in await client.get_stealer_log_domains_for_email(args.value)]

    log.info("Stealer log results", kind=args.kind, query=args.value, count=len(values))
    for value in values:
        log.info(value)


COMMANDS = {
    "breaches": cmd_breaches,
    "breach": cmd_breach,
    "latest": cmd_latest,
    "all-breaches": cmd_all_breaches,
    "pastes": cmd_pastes,
    "password": cmd_password,
    "range": cmd_range,
    "subscription": cmd_subscription,
    "domains": cmd_domains,
    "stealer": cmd_stealer,
}


if __name__ == "__main__":
    sys.exit(main())
