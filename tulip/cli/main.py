"""Main CLI application for Tulip."""

import functools
import logging

import click

from .. import __version__
from ..config import Settings
from ..crypto import NaclKeySource, WgKeySource, generate_id, load_private_id, save_id
from ..errors import TulipError
from ..network import (
    NetworkController,
    PhonebookResolver,
    add_user as add_user_to_network,
    export_user_conf,
    load_network,
    read_phonebook_file,
    write_conf,
)

logger = logging.getLogger(__name__)


def handle_errors(func):
    """Report Tulip errors as a one-line message and exit status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TulipError as e:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e
    return wrapper


@click.group()
@click.option('--debug', 'verbose', is_flag=True, help='Enable debug logging')
@click.version_option(__version__, prog_name='tulip')
def cli(verbose):
    """Tulip (tulip.network) - peer-to-peer WireGuard mesh networks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.argument('onoff', type=click.Choice(['on', 'off'], case_sensitive=False))
@handle_errors
def debug(onoff):
    """Turn WireGuard kernel logging on or off (requires root)."""
    controller = NetworkController(settings=Settings.from_env())
    controller.set_debug(onoff.lower() == 'on')
    click.echo(f"✓ WireGuard debug logging {onoff.lower()}")


@cli.command('gen-id')
@click.option('--name', '-n', required=True, help='Nickname for the Tulip ID (e.g. miles_spiderkid)')
@click.option('--output', '-o', default='./', show_default=True,
              type=click.Path(file_okay=False, exists=True), help='Output directory for the ID files')
@click.option('--key-source', type=click.Choice(['wg', 'nacl']), default='wg', show_default=True,
              help='Generate keys with wg(8) or in-process')
@handle_errors
def gen_id(name, output, key_source):
    """Generate {name}_public_id.json and {name}_private_id.json."""
    source = WgKeySource() if key_source == 'wg' else NaclKeySource()
    public_id, private_id = generate_id(name, source)
    public_path, private_path = save_id(output, public_id, private_id)

    click.echo(f"\n✓ Tulip ID generated:")
    click.echo(f"  Private ID: {private_path} (KEEP SECRET)")
    click.echo(f"  Public ID:  {public_path}")
    click.echo(f"\nPublic key: {public_id.public_key}")


@cli.command('add-user')
@click.option('--name', '-n', required=True, help='Nickname of the Tulip user')
@click.option('--network', required=True, type=click.Path(), help="Path to this server's tulip_network.json")
@click.option('--phonebook', '-p', required=True, type=click.Path(), help='Path to phonebook.json')
@click.option('--output', '-o', default='./', show_default=True,
              type=click.Path(file_okay=False, exists=True), help="Output directory for the user's network file")
@handle_errors
def add_user(name, network, phonebook, output):
    """Write a network file for a user in the phonebook (network admins)."""
    net = load_network(network)
    book = read_phonebook_file(phonebook)
    path = add_user_to_network(output, name, net, book)
    click.echo(f"✓ Network file for {name}: {path}")


@cli.command('gen-wg-conf')
@click.option('--kind', '-k', type=click.Choice(['qr', 'wg']), default='qr', show_default=True,
              help='QR code (SVG) or WireGuard config file')
@click.option('--network', required=True, type=click.Path(), help='Path to tulip_network.json')
@click.option('--priv-id', '-p', required=True, type=click.Path(), help='Path to private_id.json')
@click.option('--output', '-o', default='./', show_default=True,
              type=click.Path(file_okay=False, exists=True), help='Output directory')
@click.option('--timeout', '-t', type=float, help='Phonebook query timeout (seconds)')
@click.option('--open/--no-open', 'open_viewer', default=True, help='Open QR codes in the default viewer')
@handle_errors
def gen_wg_conf(kind, network, priv_id, output, timeout, open_viewer):
    """Generate a WireGuard config for a Tulip user."""
    settings = Settings.from_env(query_timeout=timeout)
    private_id = load_private_id(priv_id)
    net = load_network(network)

    resolver = PhonebookResolver(timeout=settings.query_timeout, path=settings.phonebook_path)
    _, conf = export_user_conf(net, private_id, resolver)
    path = write_conf(output, private_id.name, conf, kind=kind)

    click.echo(f"✓ Wrote {path}")
    if kind == 'qr' and open_viewer:
        click.echo("Opening with your default SVG viewer")
        click.launch(str(path))


@cli.command()
@click.option('--network', '-n', required=True, type=click.Path(), help='Path to tulip_network.json')
@click.option('--priv-id', '-p', required=True, type=click.Path(), help='Path to private_id.json')
@click.option('--phonebook', type=click.Path(), help='Path to phonebook.json (required in server mode)')
@click.option('--server', '-s', is_flag=True, help='Start in server mode (enables IP forwarding)')
@click.option('--timeout', '-t', type=float, help='Phonebook query timeout (seconds)')
@handle_errors
def start(network, priv_id, phonebook, server, timeout):
    """Start a Tulip network."""
    settings = Settings.from_env(query_timeout=timeout)
    net = load_network(network)
    private_id = load_private_id(priv_id)
    book = read_phonebook_file(phonebook) if phonebook else None

    controller = NetworkController(settings=settings)
    installed = controller.start(net, private_id, server=server, phonebook=book)

    click.echo(f"✓ Network {net.name} started on {controller.interface_name(net)}")
    click.echo(f"  Peers: {len(net.public_endpoints)} bootstrap, {len(installed)} in phonebook")


@cli.command()
@click.option('--network', '-n', required=True, type=click.Path(), help='Path to tulip_network.json')
@handle_errors
def stop(network):
    """Stop a Tulip network."""
    net = load_network(network)
    controller = NetworkController(settings=Settings.from_env())
    controller.stop(net)
    click.echo(f"✓ Network {net.name} stopped")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
