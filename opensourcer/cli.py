"""
Click CLI interface for opensourcer.
"""

import json
import logging
import sys
from functools import wraps
from typing import Dict, Optional, Tuple

import click

from .catalog import CatalogReader, update_catalog
from .errors import OpensourcerError, NotFound
from .events import EventLog
from .ids import short_id
from .orchestrator import create_orchestrator, KNOWN_TARGETS
from .state import ensure_home, get_catalog_dir

RULE = "-" * 60


def _fail(error: OpensourcerError) -> None:
    click.echo(f"Error: {error.message}", err=True)
    if error.hint:
        click.echo(f"Hint: {error.hint}", err=True)
    sys.exit(1)


def handle_errors(fn):
    """Turn OpensourcerError into a message on stderr and exit status 1."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except OpensourcerError as e:
            _fail(e)
    return wrapper


def parse_inputs(pairs: Tuple[str, ...]) -> Dict[str, str]:
    """
    Parse ``key=value`` input strings.

    Raises:
        click.BadParameter: If a pair has no '=' or an empty key
    """
    inputs = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Invalid input format: {pair}. Expected 'key=value'")
        key, value = pair.split("=", 1)
        if not key.strip():
            raise click.BadParameter(f"Invalid input format: {pair}. Key must not be empty")
        inputs[key.strip()] = value
    return inputs


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """
    opensourcer - Deploy open-source software locally with docker compose.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command("catalog")
@handle_errors
def catalog_cmd():
    """List available software in the catalog."""
    definitions = CatalogReader(get_catalog_dir()).list_definitions()

    click.echo("\nAvailable Software")
    click.echo(RULE + "\n")
    for definition in definitions:
        click.echo(f"  {definition.slug:<15} {definition.name}")
        click.echo(f"                  {definition.description}")
        click.echo(f"                  Category: {definition.category}\n")

    click.echo(f"Total: {len(definitions)} software available\n")
    click.echo("Use 'opensourcer info <software>' for details")
    click.echo("Use 'opensourcer deploy <software>' to deploy")


@main.command("update")
@handle_errors
def update_cmd():
    """Update the local catalog from its repository."""
    ensure_home()
    outcome = update_catalog(get_catalog_dir())
    if outcome == "cloned":
        click.echo("\n✅ Catalog downloaded successfully!\n")
        click.echo("Run 'opensourcer catalog' to see available software.")
    else:
        click.echo("\n✅ Catalog updated successfully!")


@main.command("info")
@click.argument("software")
@handle_errors
def info_cmd(software: str):
    """Show details about a software."""
    catalog = CatalogReader(get_catalog_dir())
    definition = catalog.resolve(software)

    click.echo(f"\n{definition.name}")
    click.echo(RULE + "\n")
    click.echo(f"  {definition.description}\n")
    click.echo(f"  Website: {definition.website}")
    click.echo(f"  Category: {definition.category}")
    click.echo(f"  Tags: {', '.join(definition.tags)}")

    try:
        services = catalog.compose_services(software)
    except OpensourcerError:
        services = []
    if services:
        click.echo(f"  Services: {', '.join(services)}")

    if definition.inputs:
        click.echo("\n  Configuration inputs:")
        for key, spec in definition.inputs.items():
            required = " (required)" if spec.required else ""
            click.echo(f"    --input {key}=...: {spec.label}{required}")

    click.echo(f"\nDeploy locally: opensourcer deploy {software}")


@main.command("deploy")
@click.argument("software")
@click.option("--target", type=click.Choice(KNOWN_TARGETS), default="local", help="Deployment target")
@click.option("--input", "-i", "inputs", multiple=True, help="Input in format 'key=value' (repeatable)")
@handle_errors
def deploy_cmd(software: str, target: str, inputs: Tuple[str, ...]):
    """Deploy software locally."""
    user_inputs = parse_inputs(inputs)
    orchestrator = create_orchestrator()

    click.echo(f"\n🚀 Deploying {software} locally...\n")
    result = orchestrator.deploy(software, user_inputs, target=target)
    deployment = result.deployment

    click.echo("✅ Deployment successful!\n")
    click.echo(f"  Software: {result.definition.name}")
    click.echo(f"  Status: {deployment.status.value}")
    if deployment.url:
        click.echo(f"  URL: {deployment.url}")
    click.echo(f"  Directory: {deployment.directory}")

    labels = {
        "DB_PASSWORD": "Generated DB Password",
        "ADMIN_PASSWORD": "Generated Admin Password",
        "BASIC_AUTH_PASSWORD": "Generated Auth Password",
    }
    if result.credentials:
        click.echo("")
    for variable, value in result.credentials.items():
        click.echo(f"  {labels.get(variable, variable)}: {value}")

    click.echo("\nUseful commands:")
    click.echo(f"  opensourcer logs {software}    - View logs")
    click.echo(f"  opensourcer stop {software}    - Stop deployment")
    click.echo(f"  opensourcer destroy {software} - Remove deployment")


@main.command("list")
@click.option("--json", "output_json", is_flag=True, help="Output machine-readable JSON")
@handle_errors
def list_cmd(output_json: bool):
    """List your deployments."""
    deployments = create_orchestrator().list_deployments()

    if output_json:
        print(json.dumps([d.model_dump(mode="json") for d in deployments], indent=2))
        return

    if not deployments:
        click.echo("\nNo deployments found.\n")
        click.echo("Use 'opensourcer deploy <software>' to create one.")
        return

    click.echo("\nYour Deployments")
    click.echo("-" * 70 + "\n")
    for d in deployments:
        click.echo(f"  [{d.status.value}] {d.software:<12}  {d.target:<10} {d.status.value}")
        click.echo(f"     ID: {short_id(d.id)}")
        if d.url:
            click.echo(f"     URL: {d.url}")
        click.echo(f"     Created: {d.created_at.strftime('%Y-%m-%d %H:%M')}\n")


@main.command("logs")
@click.argument("software")
@click.option("--tail", "lines", type=int, default=100, show_default=True, help="Number of lines")
@handle_errors
def logs_cmd(software: str, lines: int):
    """View logs for a deployment."""
    output = create_orchestrator().logs(software, lines=lines)
    click.echo(f"\n📋 Logs for {software}")
    click.echo("─" * 60)
    click.echo(output, nl=False)


@main.command("stop")
@click.argument("software")
@handle_errors
def stop_cmd(software: str):
    """Stop a running deployment."""
    create_orchestrator().stop(software)
    click.echo(f"\n⏹️  Stopped '{software}'\n")
    click.echo(f"Use 'opensourcer start {software}' to restart")


@main.command("start")
@click.argument("software")
@handle_errors
def start_cmd(software: str):
    """Start a stopped deployment."""
    deployment = create_orchestrator().start(software)
    click.echo(f"\n✅ Started '{software}'")
    if deployment.url:
        click.echo(f"\n  URL: {deployment.url}")


@main.command("destroy")
@click.argument("software")
@click.option("--force", is_flag=True, help="Forget the deployment even if teardown fails")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@handle_errors
def destroy_cmd(software: str, force: bool, yes: bool):
    """Remove a deployment completely, including its volumes."""
    orchestrator = create_orchestrator()
    if orchestrator.store.find(software) is None:
        raise NotFound(f"Deployment '{software}' not found")

    if not yes:
        if not click.confirm(f"Destroy '{software}' and delete its data volumes?"):
            click.echo("Destroy cancelled")
            return

    orchestrator.destroy(software, force=force)
    click.echo(f"\nDestroyed '{software}' deployment")


@main.command("history")
@click.argument("software", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output machine-readable JSON")
def history_cmd(software: Optional[str], output_json: bool):
    """Show lifecycle events, optionally for one software."""
    events = EventLog().read(software)

    if output_json:
        for event in events:
            print(json.dumps(event))
        return

    if not events:
        click.echo("No events found")
        return

    for event in events:
        data = event.get("data", {})
        detail = " ".join(f"{k}={v}" for k, v in data.items())
        click.echo(f"[{event.get('ts', 'unknown')}] {event.get('software', '?'):<12} {event.get('type', 'unknown')} {detail}".rstrip())


@main.command("serve")
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8787, type=int, help="Bind port")
def serve_cmd(host: str, port: int):
    """Serve the REST API."""
    import uvicorn

    from .api import app

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
