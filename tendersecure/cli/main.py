"""
TenderSecure CLI - Command Line Interface for the tender contract

Main entry point for all CLI commands. State is kept in a SQLite database
under the data directory, so successive invocations act on the same tender.
"""

from pathlib import Path

import click

from tendersecure.core.config import load_config
from tendersecure.utils.logger import configure_logging


class AddressType(click.ParamType):
    """0x-prefixed 20-byte hex address, converted to bytes."""

    name = "address"

    def convert(self, value, param, ctx):
        from tendersecure.crypto import ADDRESS_SIZE, hex_to_bytes
        from tendersecure.utils.validation import validate_hex_string

        if isinstance(value, bytes):
            return value
        is_valid, err = validate_hex_string(value, param.name if param else "address", ADDRESS_SIZE)
        if not is_valid:
            self.fail(err, param, ctx)
        return hex_to_bytes(value)


ADDRESS = AddressType()


def _open_host(ctx):
    """Host backed by the configured database."""
    from tendersecure.core.host import Host
    from tendersecure.core.storage import StorageManager

    config = ctx.obj["config"]
    storage = StorageManager(config.data_dir, config.db_name)
    return Host(storage=storage, max_proposal_length=config.max_proposal_length)


def _run(ctx, caller, message, *args, value=0):
    """Dispatch a call, print the outcome and exit 1 on contract errors."""
    from tendersecure.core.errors import CallRejected

    host = _open_host(ctx)
    try:
        outcome = host.call(caller, message, *args, value=value)
    except CallRejected as e:
        raise click.ClickException(str(e))

    if not outcome.ok:
        click.echo(f"✗ {outcome.error.label}")
        ctx.exit(1)
    return host, outcome


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--data-dir", default=None, help="Data directory (overrides config)")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON or TOML config file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, data_dir, config_path):
    """TenderSecure - Sealed-procurement tender with escrow payout"""
    config = load_config(config_path)
    if data_dir:
        config = config.model_copy(update={"data_dir": Path(data_dir).expanduser()})

    configure_logging(config, debug=debug)

    config.ensure_dirs()
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Account Commands
# =============================================================================


@cli.command("keygen")
def keygen():
    """Generate a new keypair and print its address"""
    from tendersecure.crypto import generate_keypair

    kp = generate_keypair()
    click.echo(f"✓ Keypair generated")
    click.echo(f"  Address:     {kp.address_hex}")
    click.echo(f"  Public key:  {kp.public_key_hex}")
    click.echo(f"  Private key: {kp.private_key_hex}")
    click.echo(f"  ⚠️  Store the private key safely - it is not saved anywhere!")


@cli.command("fund")
@click.argument("address", type=ADDRESS)
@click.argument("amount", type=click.IntRange(min=0))
@click.pass_context
def fund(ctx, address, amount):
    """Credit AMOUNT to ADDRESS from the demo faucet"""
    from tendersecure.core.errors import CallRejected
    from tendersecure.crypto import bytes_to_hex

    host = _open_host(ctx)
    try:
        balance = host.fund(address, amount)
    except CallRejected as e:
        raise click.ClickException(str(e))

    symbol = ctx.obj["config"].currency_symbol
    click.echo(f"✓ {bytes_to_hex(address)} balance: {balance} {symbol}")


# =============================================================================
# Lifecycle Commands
# =============================================================================


@cli.command("deploy")
@click.option("--owner", required=True, type=ADDRESS, help="Deployer / owner address")
@click.option("--endowment", default=0, type=click.IntRange(min=0), help="Initial escrow funding")
@click.pass_context
def deploy(ctx, owner, endowment):
    """Deploy the tender contract"""
    from tendersecure.core.errors import CallRejected
    from tendersecure.crypto import bytes_to_hex

    host = _open_host(ctx)
    if host.contract is not None:
        raise click.ClickException("Contract already deployed")
    if host.balance_of(owner) < endowment:
        host.fund(owner, endowment - host.balance_of(owner))

    try:
        host.deploy(owner, endowment=endowment)
    except CallRejected as e:
        raise click.ClickException(str(e))

    click.echo(f"✓ Tender deployed at {bytes_to_hex(host.contract_address)}")
    click.echo(f"  Owner:  {bytes_to_hex(owner)}")
    click.echo(f"  Escrow: {endowment} {ctx.obj['config'].currency_symbol}")


@cli.command("start")
@click.option("--caller", required=True, type=ADDRESS)
@click.pass_context
def start(ctx, caller):
    """Open the bidding window (owner only)"""
    _run(ctx, caller, "start_bidding")
    click.echo("✓ Bidding open")


@cli.command("stop")
@click.option("--caller", required=True, type=ADDRESS)
@click.pass_context
def stop(ctx, caller):
    """Close the bidding window (owner only)"""
    _run(ctx, caller, "stop_bidding")
    click.echo("✓ Bidding closed")


@cli.command("submit-amount")
@click.option("--caller", required=True, type=ADDRESS)
@click.option("--value", default=0, type=click.IntRange(min=0), help="Funds to add to escrow")
@click.pass_context
def submit_amount(ctx, caller, value):
    """Add funds to the escrow (owner only)"""
    _, outcome = _run(ctx, caller, "submit_tender_amount", value=value)
    click.echo(f"✓ Escrow: {outcome.value} {ctx.obj['config'].currency_symbol}")


@cli.command("enter")
@click.option("--caller", required=True, type=ADDRESS)
@click.option("--proposal", required=True, help="Proposal document reference")
@click.option("--value", default=0, type=click.IntRange(min=0), help="Funds attached to the proposal")
@click.pass_context
def enter(ctx, caller, proposal, value):
    """Submit a proposal while bidding is open"""
    host, _ = _run(ctx, caller, "enter", proposal, value=value)
    click.echo(f"✓ Proposal submitted ({len(host.query('get_bidders'))} entries)")


@cli.command("pick")
@click.option("--caller", required=True, type=ADDRESS)
@click.option("--winner", required=True, type=ADDRESS)
@click.pass_context
def pick(ctx, caller, winner):
    """Pay the escrow to WINNER and clear the registry"""
    from tendersecure.crypto import bytes_to_hex

    _, outcome = _run(ctx, caller, "pick_bidder", winner)
    won = outcome.events[-1]
    click.echo(f"✓ {bytes_to_hex(won.winner)} won {won.amount} {ctx.obj['config'].currency_symbol}")


# =============================================================================
# Inspection Commands
# =============================================================================


@cli.command("status")
@click.pass_context
def status(ctx):
    """Show owner, phase, escrow and proposals"""
    from tendersecure.crypto import bytes_to_hex

    host = _open_host(ctx)
    if host.contract is None:
        click.echo("No tender deployed.")
        return

    symbol = ctx.obj["config"].currency_symbol
    click.echo(f"Contract: {bytes_to_hex(host.contract_address)}")
    click.echo(f"Owner:    {bytes_to_hex(host.query('owner'))}")
    click.echo(f"Bidding:  {'open' if host.query('can_submit_proposal') else 'closed'}")
    click.echo(f"Escrow:   {host.query('get_tender_amount')} {symbol}")

    bidders = host.query("get_bidders")
    click.echo(f"Entries:  {len(bidders)}")
    for bidder in dict.fromkeys(bidders):
        proposal = host.query("get_proposal_for_bidder", bidder)
        click.echo(f"  {bytes_to_hex(bidder)}: {proposal}")


@cli.command("events")
@click.pass_context
def events(ctx):
    """List emitted events in order"""
    import json

    host = _open_host(ctx)
    if not host.event_log:
        click.echo("No events.")
        return

    for i, event in enumerate(host.event_log):
        click.echo(f"  #{i} {event.kind} {json.dumps(event.to_dict())}")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.pass_context
def demo(ctx):
    """Run an in-memory tender from opening to payout"""
    from tendersecure.core.host import Host
    from tendersecure.crypto import generate_keypair, short_address

    symbol = ctx.obj["config"].currency_symbol

    click.echo("=" * 60)
    click.echo("  TENDERSECURE - DEMO")
    click.echo("=" * 60)
    click.echo()

    owner = generate_keypair().address
    alice = generate_keypair().address
    bob = generate_keypair().address

    host = Host()
    host.fund(owner, 1000)
    host.fund(alice, 50)
    host.fund(bob, 50)

    click.echo("🏛️  Deploying tender with 1000 escrow...")
    host.deploy(owner, endowment=1000)
    click.echo(f"  ✓ Escrow: {host.query('get_tender_amount')} {symbol}")
    click.echo()

    click.echo("🚫 Alice bids before the window opens...")
    outcome = host.call(alice, "enter", "doc://alice/v1")
    click.echo(f"  ✗ {outcome.error.label}")

    click.echo("📢 Owner opens bidding...")
    host.call(owner, "start_bidding")
    click.echo(f"  ✓ Bidding open: {host.query('can_submit_proposal')}")
    click.echo()

    click.echo("📨 Proposals arrive...")
    host.call(alice, "enter", "doc://alice/v1", value=5)
    host.call(bob, "enter", "doc://bob/v1")
    host.call(alice, "enter", "doc://alice/v2")
    for bidder in dict.fromkeys(host.query("get_bidders")):
        click.echo(f"  {short_address(bidder)}: {host.query('get_proposal_for_bidder', bidder)}")
    click.echo(f"  Entries: {len(host.query('get_bidders'))}, "
               f"escrow: {host.query('get_tender_amount')} {symbol}")
    click.echo()

    click.echo("🔒 Owner closes bidding and picks Alice...")
    host.call(owner, "stop_bidding")
    outcome = host.call(owner, "pick_bidder", alice)
    click.echo(f"  ✓ Won: {short_address(outcome.events[-1].winner)} "
               f"received {outcome.events[-1].amount} {symbol}")
    click.echo(f"  ✓ Alice balance: {host.balance_of(alice)} {symbol}")
    click.echo(f"  ✓ Entries after settlement: {len(host.query('get_bidders'))}")
    click.echo()
    click.echo("=" * 60)


if __name__ == "__main__":
    cli()
