"""
Enom CLI Main Entry Point

Command-line interface for Enom domain operations.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from enom_client import Domain, EnomClient
from enom_client.exceptions import (
    CommandNotFound,
    EnomError,
    InterfaceError,
    InvalidCredentials,
)
from enom_cli.config import CLIConfig
from enom_cli.output import OutputFormatter, print_error, print_info


USAGE = """
This is a command line tool for Enom.

Before using this tool you should create a file called .enomconfig in your home
directory and add the following to that file:

username: YOUR_USERNAME
password: YOUR_PASSWORD

Alternatively you can pass the credentials via command-line arguments, as in:

enom -u username -p password command

You can run commands against the test interface with the -t flag:
enom -u username -p password -t command

You can set an http proxy host with the --proxyaddr flag, e.g. to use a proxy
server with an already-whitelisted IP. You can also optionally specify
the proxy port, user, and password.

enom -u username -p password --proxyaddr enom-proxy.example.com --proxyport 1080 --proxyuser user --proxypass pass

== Commands

All commands are executed as enom [options] command [command-options] args

The following commands are available:

help                                    # Show this usage

list                                    # List all domains
check domain.com                        # Check if a domain is available (for registration)
describe domain.com                     # Describe a domain
register domain.com                     # Register a domain with Enom
renew domain.com                        # Renew a domain with Enom
transfer domain.com 867e5926e93         # Transfer a domain to Enom (requires auth/EPP code)
"""


# Global state for the CLI session
class CLIState:
    client: Optional[EnomClient] = None
    formatter: Optional[OutputFormatter] = None


state = CLIState()


class EnomGroup(click.Group):
    """
    Command group that reports registrar errors as plain messages.

    Unknown subcommands raise CommandNotFound instead of click's usage error.
    """

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name is not None and self.get_command(ctx, cmd_name) is None:
            raise CommandNotFound(cmd_name)
        return super().resolve_command(ctx, args)

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except (CommandNotFound, InvalidCredentials, InterfaceError) as e:
            print_info(str(e))
            ctx.exit(1)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group(cls=EnomGroup, invoke_without_command=True)
@click.option("--username", "-u", help="Enom account username")
@click.option("--password", "-p", help="Enom account password (or use ENOM_PASSWORD env)")
@click.option("-t", "test", is_flag=True, help="Use the Enom test interface")
@click.option("--proxyaddr", help="HTTP proxy host")
@click.option("--proxyport", type=int, help="HTTP proxy port")
@click.option("--proxyuser", help="HTTP proxy user")
@click.option("--proxypass", help="HTTP proxy password")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file path")
@click.option("--format", "-f", type=click.Choice(["table", "json"]), default="table", help="Output format")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.version_option(version="1.0.0")
@click.pass_context
def cli(ctx, username, password, test, proxyaddr, proxyport, proxyuser, proxypass, config_path, format, debug, quiet):
    """Enom CLI - Domain registrar operations."""
    # Setup logging
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    state.formatter = OutputFormatter(format=format, quiet=quiet)
    state.client = None

    # Load config file
    if config_path:
        loaded_config = CLIConfig.from_file(Path(config_path))
    else:
        loaded_config = CLIConfig.find_and_load() or CLIConfig()

    # CLI options override config file
    ctx.ensure_object(dict)
    ctx.obj["client_config"] = loaded_config.to_client_config(
        username=username,
        password=password,
        test=test,
        proxyaddr=proxyaddr,
        proxyport=proxyport,
        proxyuser=proxyuser,
        proxypass=proxypass,
    )

    if ctx.invoked_subcommand is None:
        click.echo(USAGE)


def get_client(ctx) -> EnomClient:
    """
    Get or create the Enom client.

    Args:
        ctx: Click context

    Returns:
        Client bound to the merged configuration, closed with the context
    """
    if state.client is None:
        state.client = EnomClient(ctx.obj["client_config"])
        ctx.call_on_close(state.client.close)
    return state.client


# =============================================================================
# Commands
# =============================================================================

@cli.command("help")
def help_command():
    """Show usage."""
    click.echo(USAGE)


@cli.command("list")
@click.pass_context
def list_command(ctx):
    """List all domains in the account."""
    domains = Domain.all(get_client(ctx))
    state.formatter.table(
        ["name", "expiration_date"],
        [(domain.name, domain.expiration_date) for domain in domains],
    )


@cli.command("check")
@click.argument("name")
@click.pass_context
def check_command(ctx, name):
    """
    Check if a domain is available for registration.

    NAME: Domain name to check.
    """
    availability = Domain.check(get_client(ctx), name)
    print_info(f"{name} is {availability}")


@cli.command("describe")
@click.argument("name")
@click.pass_context
def describe_command(ctx, name):
    """
    Describe a domain in the account.

    NAME: Domain name to describe.
    """
    domain = Domain.find(get_client(ctx), name)
    state.formatter.record({
        "name": domain.name,
        "expiration_date": domain.expiration_date,
        "registration_status": domain.registration_status,
        "locked": domain.locked,
        "nameservers": domain.nameservers,
    })


@cli.command("register")
@click.argument("name")
@click.option("--years", "-y", type=int, help="Registration period in years")
@click.option("--ns", "-n", multiple=True, help="Nameserver (can specify multiple)")
@click.pass_context
def register_command(ctx, name, years, ns):
    """
    Register a domain.

    NAME: Domain name to register.

    \b
    Examples:
      enom register example.com
      enom register example.com --years 2 --ns ns1.example.net --ns ns2.example.net
    """
    domain = Domain.register(get_client(ctx), name, nameservers=list(ns) or None, years=years)
    state.formatter.success(f"Registered {domain.name} (expires {domain.expiration_date.isoformat()})")


@cli.command("renew")
@click.argument("name")
@click.option("--years", "-y", type=int, help="Renewal period in years")
@click.pass_context
def renew_command(ctx, name, years):
    """
    Renew a domain.

    NAME: Domain name to renew.
    """
    domain = Domain.renew(get_client(ctx), name, years=years)
    state.formatter.success(f"Renewed {domain.name} (expires {domain.expiration_date.isoformat()})")


@cli.command("transfer")
@click.argument("name")
@click.argument("auth_code")
@click.option("--renew", is_flag=True, help="Add a renewal year to the transfer")
@click.pass_context
def transfer_command(ctx, name, auth_code, renew):
    """
    Transfer a domain to Enom.

    NAME: Domain name to transfer.
    AUTH_CODE: Authorization (EPP) code from the current registrar.
    """
    if Domain.transfer(get_client(ctx), name, auth_code, renew=renew):
        state.formatter.success(f"Transfer of {name} requested")
    else:
        print_error(f"Transfer of {name} failed")
        ctx.exit(1)


# =============================================================================
# Entry Point
# =============================================================================

def main():
    """Main entry point."""
    try:
        cli()
    except EnomError as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
