"""CLI: rtc-call credential fetch"""

import json
from typing import Optional

import click
from rich.console import Console

from rtc_call.credentials import CredentialProvider
from rtc_call.errors import CredentialUnavailable
from rtc_call.transport.http import DEFAULT_ISSUER_URL, HttpClient

console = Console()


def _run(coro):
    from rtc_call.cli.main import _run
    return _run(coro)


@click.group()
def credential():
    """Credential issuer commands."""


@credential.command("fetch")
@click.option("--channel", required=True, envvar="RTC_CHANNEL", help="Channel name")
@click.option("--uid", default=None, type=int, help="Personalize the token to this uid")
@click.option("--issuer", default=DEFAULT_ISSUER_URL, envvar="RTC_ISSUER_URL", show_default=True)
@click.option("--json-output", "--json", is_flag=True)
def credential_fetch(channel: str, uid: Optional[int], issuer: str, json_output: bool):
    """Request a join token for a channel."""

    async def _fetch():
        http = HttpClient(base_url=issuer)
        fetch = CredentialProvider(http).fetch_credential(channel, uid)
        try:
            if json_output:
                return await fetch
            with console.status(f"Requesting token for {channel}..."):
                return await fetch
        finally:
            await http.close()

    try:
        cred = _run(_fetch())
    except CredentialUnavailable as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps(cred.model_dump(), indent=2))
        return
    console.print(f"[green]Token for {cred.channel}[/green]" + (f" (uid {cred.uid})" if cred.uid is not None else ""))
    click.echo(cred.token)
