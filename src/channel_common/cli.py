"""
Command-line plumbing shared by the flow entry points.

Every flag mirrors an environment variable (see config.ENV_VARS); flags win
over the environment.
"""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from channel_common.config import ENV_VARS, FlowSettings
from channel_common.exceptions import ProvisioningException

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to stderr so stdout only carries flow output."""
    logging.basicConfig(
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def build_parser(description: str, require_account: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--key-file",
        metavar="PATH",
        help=f"service account JSON key (env: {ENV_VARS['key_file']} "
        "or GOOGLE_APPLICATION_CREDENTIALS)",
    )
    parser.add_argument(
        "--reseller-admin-user",
        metavar="EMAIL",
        help=f"reseller admin to impersonate (env: {ENV_VARS['reseller_admin_user']})",
    )
    parser.add_argument(
        "--customer-domain",
        metavar="DOMAIN",
        help=f"customer primary domain (env: {ENV_VARS['customer_domain']})",
    )
    if require_account:
        parser.add_argument(
            "--account-id",
            metavar="ID",
            help=f"reseller account ID, e.g. C012345 (env: {ENV_VARS['account_id']})",
        )
        parser.add_argument(
            "--channel-partner-id",
            metavar="ID",
            help="channel partner link ID, distributors only "
            f"(env: {ENV_VARS['channel_partner_id']})",
        )
        parser.add_argument(
            "--purchase-order-id",
            metavar="ID",
            help=f"purchase order ID, up to 80 characters (env: {ENV_VARS['purchase_order_id']})",
        )
    parser.add_argument(
        "--log-level", metavar="LEVEL", type=str.upper, help="logging level (env: LOG_LEVEL)"
    )
    return parser


def parse_settings(
    argv: Optional[Sequence[str]],
    description: str,
    require_account: bool = True,
) -> tuple[FlowSettings, argparse.Namespace]:
    """
    Parse command-line flags and build settings.

    Returns:
        (settings, parsed arguments)

    Raises:
        ConfigurationException: If a required value is missing or invalid
    """
    args = build_parser(description, require_account).parse_args(argv)
    overrides = {
        name: value
        for name, value in vars(args).items()
        if name in ENV_VARS and value is not None
    }
    settings = FlowSettings.from_env(overrides, require_account=require_account)
    return settings, args


def run_main(
    flow_class,
    argv: Optional[Sequence[str]],
    description: str,
    require_account: bool = True,
) -> int:
    """
    Parse settings, configure logging and run a flow.

    Returns:
        Process exit status: 0 on success, 1 on a provisioning error
    """
    try:
        settings, args = parse_settings(argv, description, require_account)
        configure_logging(args.log_level)
        flow_class(settings, log_level=args.log_level).run()
    except ProvisioningException as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0
