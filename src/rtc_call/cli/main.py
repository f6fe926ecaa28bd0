"""
rtc-call CLI — diagnostics for the credential issuer and uid allocation.

Commands:
  rtc-call credential fetch     Request a join token from the issuer
  rtc-call identity allocate    Print locally allocated uids
"""

import asyncio

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install rtc-call[cli]")

console = Console()


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
def main():
    """rtc-call CLI — inspect credentials and uids for a call channel."""


# Register subcommands from separate modules
from rtc_call.cli.credential import credential
from rtc_call.cli.identity import identity

main.add_command(credential)
main.add_command(identity)


if __name__ == "__main__":
    main()
