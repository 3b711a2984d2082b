"""Command-line entry point.

Commands:
    oa-verify identity <document.json>   Verify the issuer's DNS-TXT identity
    oa-verify issued <document.json>     Check the target hash on its smart contract(s)
"""

import asyncio
import json
from enum import IntEnum
from pathlib import Path
from typing import Optional

import typer

from oaverify.core.config import DNS_RESOLVER_URL, NETWORK
from oaverify.logging_config import configure_logging
from oaverify.oa.api_models import FragmentStatus
from oaverify.oa.document import load_document
from oaverify.oa.exceptions import DocumentFormatError, VerifierError
from oaverify.oa.issued import check_document_issued
from oaverify.oa.options import default_options
from oaverify.oa.verify import verify_document


class ExitCode(IntEnum):
    OK = 0
    INVALID = 1
    ERROR = 2
    DOCUMENT_ERROR = 3


EXIT_CODES = {
    FragmentStatus.VALID: ExitCode.OK,
    FragmentStatus.SKIPPED: ExitCode.OK,
    FragmentStatus.INVALID: ExitCode.INVALID,
    FragmentStatus.ERROR: ExitCode.ERROR,
}

app = typer.Typer(
    name="oa-verify",
    help="Verify OpenAttestation document issuer identities.",
    no_args_is_help=True,
)


def _echo_error(code: str, message: str) -> None:
    typer.echo(json.dumps({"error": {"code": code, "message": message}}))


def _load(document: Path):
    try:
        return load_document(document)
    except DocumentFormatError as e:
        _echo_error("DOCUMENT_INVALID", e.message)
        raise typer.Exit(code=ExitCode.DOCUMENT_ERROR)


@app.callback()
def main() -> None:
    """OpenAttestation verifier."""


@app.command("identity")
def identity_cmd(
    document: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Wrapped OpenAttestation document (JSON)",
    ),
    network: str = typer.Option(NETWORK, "--network", "-n", help="Network name"),
    rpc_url: Optional[str] = typer.Option(
        None, "--rpc-url", help="JSON-RPC endpoint (overrides --network)"
    ),
    dns_resolver: str = typer.Option(
        DNS_RESOLVER_URL, "--dns-resolver", help="DNS-over-HTTPS JSON endpoint"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Verify that a document's issuer owns its smart contract via DNS-TXT.

    Prints the ISSUER_IDENTITY fragment as JSON. Exit code is 0 for VALID
    or SKIPPED, 1 for INVALID, 2 for ERROR, 3 for unreadable documents.
    """
    configure_logging(log_level=log_level)

    doc = _load(document)

    try:
        options = default_options(network=network, rpc_url=rpc_url, dns_resolver_url=dns_resolver)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--network")

    fragment = asyncio.run(verify_document(doc, options))
    typer.echo(json.dumps(fragment.to_dict(), indent=2))
    raise typer.Exit(code=EXIT_CODES[fragment.status])


@app.command("issued")
def issued_cmd(
    document: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Wrapped OpenAttestation document (JSON)",
    ),
    network: str = typer.Option(NETWORK, "--network", "-n", help="Network name"),
    rpc_url: Optional[str] = typer.Option(
        None, "--rpc-url", help="JSON-RPC endpoint (overrides --network)"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Check that a document's target hash is issued on its smart contract(s).

    Exit code is 0 when every contract reports the hash as issued, 1 when
    any does not, 2 on chain or contract errors, 3 for unusable documents.
    """
    configure_logging(log_level=log_level)
    doc = _load(document)

    try:
        options = default_options(network=network, rpc_url=rpc_url)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--network")

    try:
        contracts = asyncio.run(check_document_issued(doc, options.network))
    except DocumentFormatError as e:
        _echo_error("DOCUMENT_INVALID", e.message)
        raise typer.Exit(code=ExitCode.DOCUMENT_ERROR)
    except VerifierError as e:
        _echo_error(type(e).__name__, e.message)
        raise typer.Exit(code=ExitCode.ERROR)

    issued = all(contracts.values())
    typer.echo(json.dumps(
        {"issued": issued, "targetHash": doc.target_hash, "contracts": contracts}, indent=2
    ))
    raise typer.Exit(code=ExitCode.OK if issued else ExitCode.INVALID)


if __name__ == "__main__":
    app()
