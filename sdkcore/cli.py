#!/usr/bin/env python3
"""
Credential resolution CLI

Resolves an account credential from the SDK configuration and prints a
masked summary. Useful to check a config file before deploying it.

Usage:
    # Default account from the configured file
    sdk-credentials

    # Look up by API username
    sdk-credentials --identity jb_us_seller

    # Use a specific config file
    sdk-credentials --config config/sdk_config.properties --list-accounts

Exit codes:
    0  credential resolved
    1  no matching / default account (MissingCredentialException)
    2  account found but malformed (InvalidCredentialException)
    3  config file missing or unparseable
"""
import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from sdkcore.core.accounts.manager import CredentialManager
from sdkcore.core.config import get_settings
from sdkcore.core.config_store import ConfigLoadError, ConfigStore, get_config_store
from sdkcore.core.credentials.exceptions import InvalidCredentialException, MissingCredentialException
from sdkcore.core.credentials.models import CredentialType

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_INVALID = 2
EXIT_CONFIG = 3


def _mask(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return f"{value[:2]}{'*' * (len(value) - 4)}{value[-2:]}"


def format_credential(credential) -> List[str]:
    """Human-readable lines for a credential, secrets masked."""
    lines = [
        f"Account:   {credential.account_id}",
        f"Type:      {credential.credential_type.value}",
        f"UserName:  {credential.username}",
        f"Password:  {_mask(credential.password)}",
    ]
    if credential.credential_type == CredentialType.SIGNATURE:
        lines.append(f"Signature: {_mask(credential.signature)}")
    else:
        lines.append(f"CertPath:  {credential.cert_path}")
        lines.append(f"CertKey:   {_mask(credential.cert_key)}")
    lines.append(f"Subject:   {credential.subject or '-'}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Resolve an API credential from the SDK account configuration'
    )
    parser.add_argument('--config', type=str, default=None, metavar='PATH',
                        help='Account config file (.properties or .yaml); defaults to SDK_CONFIG_FILE / config dir')
    parser.add_argument('--identity', '-u', type=str, default=None, metavar='USER',
                        help='API UserName to resolve (default: the default account)')
    parser.add_argument('--list-accounts', action='store_true',
                        help='List declared account ids and exit')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    load_dotenv()
    args = build_parser().parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format=settings.log_format,
    )

    try:
        if args.config:
            store = ConfigStore()
            store.load(args.config)
        else:
            store = get_config_store()
    except (OSError, ConfigLoadError) as e:
        logger.error(f"Cannot load account config: {e}")
        return EXIT_CONFIG

    manager = CredentialManager(config_store=store, settings=settings)

    if args.list_accounts:
        accounts = manager.list_accounts()
        if not accounts:
            print("No accounts declared")
        for account_id in accounts:
            print(account_id)
        return EXIT_OK

    try:
        credential = manager.get_credential_object(args.identity)
    except MissingCredentialException as e:
        logger.error(str(e))
        return EXIT_MISSING
    except InvalidCredentialException as e:
        logger.error(str(e))
        return EXIT_INVALID

    for line in format_credential(credential):
        print(line)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
