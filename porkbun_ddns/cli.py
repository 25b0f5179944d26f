import argparse
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import settings
from .dns import AddressFamily, DDNSUpdater, PorkbunClient, PorkbunError, count_failures
from .logger import logger, set_silent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="porkbun-ddns",
        description="Point a Porkbun A/AAAA record at this host's public address.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-k",
        "--key",
        type=Path,
        metavar="PATH",
        default=settings.key_file,
        help="path to the porkbun api key file",
    )
    parser.add_argument(
        "-s", "--silent", action="store_true", help="silence successful log messages"
    )
    # 'w' is for www, meaning you can do `porkbun-ddns -wwww example.com`
    parser.add_argument("-w", "--subdomain", help="which subdomain to update, if any")
    parser.add_argument(
        "-4",
        "--ipv4",
        dest="families",
        action="append_const",
        const=AddressFamily.IPV4,
        help="update the A record (default)",
    )
    parser.add_argument(
        "-6",
        "--ipv6",
        dest="families",
        action="append_const",
        const=AddressFamily.IPV6,
        help="update the AAAA record",
    )
    parser.add_argument(
        "--list-records",
        action="store_true",
        help="list every record of the domain instead of updating",
    )
    parser.add_argument("domain", help="domain to update")
    return parser


def list_records(client: PorkbunClient, domain: str) -> int:
    try:
        records = client.fetch_records(domain)
    except PorkbunError as e:
        logger.error(f"failed to retrieve records: {e}")
        return 1

    for record in records:
        logger.info(
            f"{record.type.value} {record.name} {record.content} "
            f"ttl={record.ttl} prio={record.prio} id={record.id}"
        )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.key is None:
        parser.error("no key file given (use --key or PORKBUN_DDNS_KEY_FILE)")

    set_silent(args.silent)

    try:
        client = PorkbunClient.open_keys(
            args.key, host=settings.api_host, timeout=settings.timeout
        )
    except PorkbunError as e:
        logger.error(f"failed to open key file: {e}")
        return 1

    with client:
        if args.list_records:
            return list_records(client, args.domain)

        # Keep the order given on the command line, without repeats
        families = list(dict.fromkeys(args.families or [AddressFamily.IPV4]))
        updater = DDNSUpdater(client, args.domain, args.subdomain)
        results = updater.run(families)

    return count_failures(results)
