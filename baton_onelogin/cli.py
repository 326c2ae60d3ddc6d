"""Command line entry point for the OneLogin connector."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

import requests

from .connector.connector import OneLogin
from .connector.resources import ConnectorError
from .onelogin.client import RequestError

VERSION = "dev"

_log = logging.getLogger(__name__)

_LOG_LEVELS = ("debug", "info", "warning", "error")

_CREDENTIAL_SETTINGS = ("onelogin_client_id", "onelogin_client_secret", "subdomain")


@dataclass
class Config:
    """Settings the connector needs to run."""

    client_id: str = field(default_factory=str)
    client_secret: str = field(default_factory=str)
    subdomain: str = field(default_factory=str)
    output: str = "-"
    log_level: str = "info"


def validate_config(config: Config) -> None:
    """Raise ``ValueError`` when a required setting is missing."""
    if not (config.client_id and config.client_secret and config.subdomain):
        raise ValueError(
            "onelogin-client-id, onelogin-client-secret and subdomain must be provided"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="baton-onelogin")
    parser.add_argument("--version", action="version", version=VERSION)
    parser.add_argument(
        "--onelogin-client-id",
        help="OneLogin client ID used to generate the access token. ($BATON_ONELOGIN_CLIENT_ID)",
    )
    parser.add_argument(
        "--onelogin-client-secret",
        help="OneLogin client secret used to generate the access token. ($BATON_ONELOGIN_CLIENT_SECRET)",
    )
    parser.add_argument(
        "--subdomain",
        help="OneLogin subdomain to connect to. ($BATON_SUBDOMAIN)",
    )
    parser.add_argument(
        "--output",
        help="Where to write the sync result; '-' is standard output. ($BATON_OUTPUT)",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        help="Logging level. ($BATON_LOG_LEVEL)",
    )
    return parser


def load_config(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> Config:
    """Read settings from arguments, falling back to ``BATON_*`` variables."""
    env = os.environ if environ is None else environ
    args = vars(build_parser().parse_args(argv))

    def setting(dest: str, default: str) -> str:
        value = args.get(dest)
        if value is None:
            value = env.get(f"BATON_{dest.upper()}")
        return default if value is None else value

    log_level = setting("log_level", "info").lower()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"invalid log level: {log_level}")
    client_id, client_secret, subdomain = (
        setting(dest, str()) for dest in _CREDENTIAL_SETTINGS
    )
    return Config(
        client_id=client_id,
        client_secret=client_secret,
        subdomain=subdomain,
        output=setting("output", "-"),
        log_level=log_level,
    )


def main(argv: Sequence[str] | None = None) -> int:
    try:
        config = load_config(argv)
        validate_config(config)
    except SystemExit as exit_:
        return exit_.code if isinstance(exit_.code, int) else 1
    except ValueError as err:
        print(err, file=sys.stderr)
        return 1

    logging.basicConfig(level=config.log_level.upper())

    try:
        connector = OneLogin.create(config.client_id, config.client_secret, config.subdomain)
        connector.validate()
        result = connector.sync()
    except (ConnectorError, RequestError, requests.RequestException) as err:
        _log.error("error running connector: %s", err)
        print(err, file=sys.stderr)
        return 1

    text = json.dumps(result.to_dict(), indent=2)
    if config.output == "-":
        print(text)
    else:
        Path(config.output).write_text(text + "\n", encoding="utf-8")
    return 0


if __name__ == "__main__":
    sys.exit(main())