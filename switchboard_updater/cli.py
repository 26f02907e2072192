"""Command line entry point for pushing Switchboard oracle updates."""

import click

from switchboard_updater.services.factory import build_signer, build_submitter
from switchboard_updater.utils.config import NETWORKS, Config
from switchboard_updater.utils.exceptions import UpdaterError
from switchboard_updater.utils.log_config import setup_logging

network_option = click.option(
    "--network",
    type=click.Choice(sorted(NETWORKS)),
    default=None,
    help="Target network (defaults to $NETWORK)",
)
rpc_option = click.option("--rpc-url", default=None, help="Override the network RPC URL")
contract_option = click.option(
    "--contract", "contract_address", default=None, help="Feed consumer contract address"
)
feed_option = click.option(
    "--feed-id", default=None, help="Feed id (defaults to the contract's aggregatorId)"
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Fetch Switchboard oracle updates and submit them on-chain."""
    setup_logging(verbose)


@cli.command()
@network_option
@rpc_option
@contract_option
@feed_option
@click.option("--key-file", type=click.Path(dir_okay=False), default=None,
              help="File holding a private key or mnemonic (defaults to .secret)")
@click.option("--key-env", default=None, help="Read the private key from this environment variable")
@click.option("--remote-signer", default=None, help="JSON-RPC URL of an external signer")
@click.option("--signer-address", default=None, help="Account to use with --remote-signer")
@click.option("--wait/--no-wait", default=None, help="Wait for the transaction to be mined")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for inclusion")
@click.option("--value", "value_wei", type=int, default=None, help="Value in wei sent with the update")
def submit(network, rpc_url, contract_address, feed_id, key_file, key_env,
           remote_signer, signer_address, wait, timeout, value_wei) -> None:
    """Fetch the latest updates for a feed and submit them to the contract."""
    try:
        signer = build_signer(key_file, key_env, remote_signer, signer_address)
        submitter = build_submitter(
            network=network,
            rpc_url=rpc_url,
            contract_address=contract_address,
            signer=signer,
            wait_for_confirmation=wait,
            timeout=timeout,
            value_wei=value_wei,
        )
        handle = submitter.submit(feed_id or Config.FEED_ID)
    except (UpdaterError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(handle.model_dump_json(indent=2))
    if handle.confirmed:
        click.echo("Transaction completed!")
    else:
        click.echo("Transaction submitted")


@cli.command()
@network_option
@rpc_option
@contract_option
@feed_option
def fetch(network, rpc_url, contract_address, feed_id) -> None:
    """Print the relay's update batch for a feed without submitting it."""
    try:
        submitter = build_submitter(
            network=network, rpc_url=rpc_url, contract_address=contract_address
        )
        batch = submitter.fetch_updates(feed_id or Config.FEED_ID)
    except (UpdaterError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(batch.model_dump_json(indent=2))


@cli.command("feed-id")
@network_option
@rpc_option
@contract_option
def feed_id_command(network, rpc_url, contract_address) -> None:
    """Print the contract's aggregatorId."""
    try:
        submitter = build_submitter(
            network=network, rpc_url=rpc_url, contract_address=contract_address
        )
        click.echo(submitter.resolve_feed_id())
    except (UpdaterError, ValueError) as e:
        raise click.ClickException(str(e)) from e


@cli.command()
def networks() -> None:
    """List the networks the updater knows about."""
    for name, target in sorted(NETWORKS.items()):
        click.echo(f"{name:<18} chain={target.chain_id:<8} rpc={target.rpc_url}")


@cli.command()
@click.option("--host", default="0.0.0.0")
@click.option("--port", type=int, default=8000)
def serve(host, port) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("switchboard_updater.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
