"""
Command line tools for the RAGFlow bridge.

Usage
-----
    # Check the configured RAGFlow instance answers
    ragflow-bridge health-check --output json

    # List datasets straight from RAGFlow
    ragflow-bridge list-datasets --limit 10

    # Show connection settings
    ragflow-bridge show-instance
"""

import asyncio
import json
import sys
import time
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.table import Table

from shared.config.settings import RAGFlowInstance, settings
from shared.models.base import utc_timestamp
from ..infrastructure.external.ragflow_client import create_ragflow_client

OUTPUT_FORMATS = click.Choice(["table", "json"])


async def check_instance(instance: RAGFlowInstance) -> Dict[str, Any]:
    """Time one authenticated request against ``instance``."""
    client = create_ragflow_client(instance)
    started = time.perf_counter()
    try:
        await client.health_check()
        status, message = "healthy", "RAGFlow service is healthy"
    except Exception as e:
        status, message = "unhealthy", str(e)
    finally:
        await client.close()

    return {
        "name": instance.name,
        "api_url": instance.api_url,
        "status": status,
        "message": message,
        "response_time_ms": round((time.perf_counter() - started) * 1000, 1),
        "checked_at": utc_timestamp(),
    }


async def fetch_datasets(instance: RAGFlowInstance, page: int, limit: int, name: Optional[str]) -> List[Dict[str, Any]]:
    client = create_ragflow_client(instance)
    try:
        return await client.list_datasets(page=page, page_size=limit, name=name)
    finally:
        await client.close()


def _print_table(title: str, columns: List[str], rows: List[List[Any]]) -> None:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*["" if value is None else str(value) for value in row])
    Console().print(table)


def _print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.version_option(version=settings.service_version, prog_name="ragflow-bridge")
def cli():
    """RAGFlow bridge command line tools.

    Every command talks to the RAGFlow instance configured through the
    RAGFLOW_API_URL and RAGFLOW_API_KEY settings.
    """


@cli.command("health-check")
@click.option("--output", "-o", type=OUTPUT_FORMATS, default="table", show_default=True)
def health_check(output: str):
    """Check the configured RAGFlow instance answers.

    Exits with status 1 when it does not.
    """
    result = asyncio.run(check_instance(settings.ragflow_instance()))

    if output == "json":
        _print_json(result)
    else:
        _print_table(
            "RAGFlow health",
            ["Instance", "Status", "Message", "Response time (ms)", "Checked at"],
            [[result["name"], result["status"], result["message"], result["response_time_ms"], result["checked_at"]]]
        )

    if result["status"] != "healthy":
        sys.exit(1)


@cli.command("test-instance")
@click.option("--timeout", type=float, help="Override the configured request timeout in seconds")
def test_instance(timeout: Optional[float]):
    """Test the connection to the configured RAGFlow instance."""
    instance = settings.ragflow_instance()
    if timeout is not None:
        instance = instance.model_copy(update={"timeout": timeout})

    click.echo(f"Testing {instance.name} at {instance.api_url} ...")
    result = asyncio.run(check_instance(instance))

    if result["status"] != "healthy":
        click.echo(f"Connection failed: {result['message']}", err=True)
        sys.exit(1)
    click.echo(f"Connection succeeded in {result['response_time_ms']} ms")


@cli.command("list-datasets")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--limit", default=30, show_default=True, type=click.IntRange(min=1))
@click.option("--name", help="Only the dataset with this name")
@click.option("--output", "-o", type=OUTPUT_FORMATS, default="table", show_default=True)
def list_datasets(page: int, limit: int, name: Optional[str], output: str):
    """List datasets of the configured RAGFlow instance."""
    try:
        datasets = asyncio.run(fetch_datasets(settings.ragflow_instance(), page, limit, name))
    except Exception as e:
        click.echo(f"Error: failed to list datasets: {e}", err=True)
        sys.exit(1)

    if output == "json":
        _print_json(datasets)
        return

    if not datasets:
        click.echo("No datasets found")
        return
    _print_table(
        "RAGFlow datasets",
        ["ID", "Name", "Documents", "Chunks", "Chunk method", "Embedding model"],
        [
            [
                dataset.get("id"),
                dataset.get("name"),
                dataset.get("document_count"),
                dataset.get("chunk_count"),
                dataset.get("chunk_method"),
                dataset.get("embedding_model"),
            ]
            for dataset in datasets
        ]
    )


@cli.command("show-instance")
@click.option("--output", "-o", type=OUTPUT_FORMATS, default="table", show_default=True)
def show_instance(output: str):
    """Show the configured RAGFlow instance; the API key is masked."""
    instance = settings.ragflow_instance()
    key = instance.api_key
    details = {
        "name": instance.name,
        "api_url": instance.api_url,
        "api_key": f"{key[:4]}..." if len(key) > 8 else ("set" if key else "not set"),
        "timeout": instance.timeout,
    }

    if output == "json":
        _print_json(details)
    else:
        _print_table("RAGFlow instance", ["Setting", "Value"], [[field, value] for field, value in details.items()])


if __name__ == "__main__":
    cli()
