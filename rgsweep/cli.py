"""
Click CLI interface for rgsweep.
"""

import json
import logging
import sys
from typing import Optional

import click

from .classify import RetentionClassifier
from .config import RunConfig
from .errors import AuthError, ConfigError, EnumerationError
from .provider import AzureResourceGroupProvider
from .runner import run_cleanup
from .tags import parse_name_list

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    if not verbose:
        # azure-core logs every HTTP request at INFO
        logging.getLogger("azure").setLevel(logging.WARNING)


def _json_output(data) -> None:
    """Output data as JSON."""
    click.echo(json.dumps(data, indent=2))


def _load_config(**overrides) -> RunConfig:
    try:
        return RunConfig.from_env().with_overrides(**overrides)
    except ConfigError as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)


def _make_provider(config: RunConfig) -> AzureResourceGroupProvider:
    if not config.subscription_id:
        click.echo("❌ No subscription given: use --subscription or set AZURE_SUBSCRIPTION_ID", err=True)
        sys.exit(1)
    return AzureResourceGroupProvider(config.subscription_id)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """
    rgsweep - Delete Azure resource groups that are not tagged to be kept.
    """
    _configure_logging(verbose)


@main.command()
@click.option("--subscription", help="Azure subscription ID (default: $AZURE_SUBSCRIPTION_ID)")
@click.option("--enable-deletion", is_flag=True, help="Actually delete resource groups (otherwise the run is blocked)")
@click.option("--monitor", is_flag=True, help="Wait for deletions to finish and report their outcome")
@click.option("--timeout", type=int, help="Seconds to wait on each deletion job when monitoring")
@click.option("--exclude", multiple=True, help="Resource group to keep regardless of tags (repeatable, comma-separated)")
@click.option("--tag-key", help="Retention tag name (case-insensitive)")
@click.option("--keep-value", help="Tag value that keeps a resource group (case-sensitive)")
@click.option("--max-workers", type=int, help="Deletion jobs to wait on at the same time")
@click.option("--report", type=click.Path(dir_okay=False), help="Append an NDJSON run report to this file")
@click.option("--json", "output_json", is_flag=True, help="Output machine-readable JSON")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
def sweep(
    subscription: Optional[str],
    enable_deletion: bool,
    monitor: bool,
    timeout: Optional[int],
    exclude: tuple,
    tag_key: Optional[str],
    keep_value: Optional[str],
    max_workers: Optional[int],
    report: Optional[str],
    output_json: bool,
    yes: bool,
):
    """
    Classify every resource group and delete the ones not kept.
    """
    env_config = _load_config()
    config = _load_config(
        subscription_id=subscription,
        enable_deletion=enable_deletion or env_config.enable_deletion,
        monitor_jobs=monitor or env_config.monitor_jobs,
        job_timeout_seconds=timeout,
        exclusions=(env_config.exclusions | parse_name_list(exclude)) if exclude else None,
        tag_key=tag_key,
        keep_value=keep_value,
        max_workers=max_workers,
    )
    provider = _make_provider(config)

    if config.enable_deletion and not yes:
        prompt = (
            f"Delete every resource group in subscription {config.subscription_id} "
            f"without '{config.tag_key}' = '{config.keep_value}'?"
        )
        if not click.confirm(prompt):
            click.echo("❌ Sweep cancelled")
            return

    result = run_cleanup(provider, config, report_path=report)

    if output_json:
        _json_output(result.summary.to_dict())
    else:
        for line in result.summary.render_lines():
            click.echo(line)

    sys.exit(result.exit_code)


@main.command()
@click.option("--subscription", help="Azure subscription ID (default: $AZURE_SUBSCRIPTION_ID)")
@click.option("--exclude", multiple=True, help="Resource group to keep regardless of tags (repeatable, comma-separated)")
@click.option("--tag-key", help="Retention tag name (case-insensitive)")
@click.option("--keep-value", help="Tag value that keeps a resource group (case-sensitive)")
@click.option("--json", "output_json", is_flag=True, help="Output machine-readable JSON")
def classify(
    subscription: Optional[str],
    exclude: tuple,
    tag_key: Optional[str],
    keep_value: Optional[str],
    output_json: bool,
):
    """
    Show which resource groups would be kept or deleted. Never deletes.
    """
    env_config = _load_config()
    config = _load_config(
        subscription_id=subscription,
        exclusions=(env_config.exclusions | parse_name_list(exclude)) if exclude else None,
        tag_key=tag_key,
        keep_value=keep_value,
    )
    provider = _make_provider(config)

    try:
        containers = provider.list_containers()
        decisions = RetentionClassifier(config.policy()).classify_all(containers, tag_source=provider)
    except (AuthError, EnumerationError) as e:
        if output_json:
            _json_output({"error": str(e)})
        else:
            click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    decisions.sort(key=lambda d: d.container_name)

    if output_json:
        _json_output([d.to_dict() for d in decisions])
        return

    if not decisions:
        click.echo("No resource groups found")
        return

    for d in decisions:
        icon = "✅" if d.keep else "🗑️ "
        click.echo(f"{icon} {d.outcome.value.upper():6} {d.container_name} ({d.location}): {d.reason}")


if __name__ == "__main__":
    main()
