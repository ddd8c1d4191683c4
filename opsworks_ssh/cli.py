"""Argument parsing, settings resolution and the fetch -> resolve -> act run."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Mapping

from .actions import Action, AmbiguousTarget, ConnectSSH, plan
from .config import Settings, default_config_path, load_defaults, resolve_settings
from .discovery import InventoryClient
from .discovery.aws_client import AWSClient
from .discovery.host_filter import HostFilter
from .exceptions import AmbiguousTargetError, ConfigError, ProviderError, SSHLaunchError
from .logging_config import configure_logging
from .ssh import exec_ssh

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ossh",
        description="SSH to running OpsWorks EC2 instances by hostname pattern",
    )
    parser.add_argument(
        "hostname",
        nargs="?",
        help="Regex matched against both the Name and opsworks:instance tags",
    )
    parser.add_argument("-s", "--stack", help="Regex matched against the opsworks:stack tag")
    parser.add_argument("-p", "--profile", help="AWS credential profile")
    parser.add_argument("-r", "--region", help="AWS region")
    parser.add_argument("-u", "--user", help="Login user for ssh")
    parser.add_argument(
        "-so", "--show-only",
        action="store_true",
        help="Print connection strings instead of connecting",
    )
    parser.add_argument(
        "-cs", "--csensitive",
        action="store_true",
        help="Match patterns case-sensitively",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Report instances skipped because they are stopped or stackless",
    )
    parser.add_argument(
        "-c", "--config",
        help="Defaults file (default: $OSSH_CONFIG or ~/.ossh.yml)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _build_client(settings: Settings) -> InventoryClient:
    return AWSClient(settings.region, settings.profile)


def run(
    settings: Settings,
    client_factory: Callable[[Settings], InventoryClient] = _build_client,
) -> int:
    """Fetch, resolve and carry out the terminal action. Returns the exit code."""
    # Compile patterns before any API call
    host_filter = HostFilter(settings.host_pattern, settings.stack_pattern, settings.case_sensitive)
    client = client_factory(settings)
    resolution = host_filter.apply(client.fetch())

    action: Action = plan(resolution.targets, settings.user, settings.show_only)

    if isinstance(action, ConnectSSH):
        logger.info("Connecting to %s (%s)", action.target.label, action.login)
        exec_ssh(action.login)
        return 0

    for line in action.lines:
        print(line)

    if isinstance(action, AmbiguousTarget):
        raise AmbiguousTargetError()

    if not resolution.targets:
        logger.warning("No running instances matched")
    return 0


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Settings first; logging is not configured until they resolve
    try:
        config_path = args.config or default_config_path(environ)
        defaults = load_defaults(config_path, environ, required=bool(args.config))
        settings = resolve_settings(args, defaults, environ)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(settings.logging)

    try:
        return run(settings)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    except (ProviderError, AmbiguousTargetError, SSHLaunchError) as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
