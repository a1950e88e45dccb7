from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click
from loguru import logger
from pydantic import BaseModel

from levr_sdk.adapters.airdrop_adapter import TreasuryAirdropAdapter
from levr_sdk.adapters.project_adapter import Pricing, ProjectAdapter
from levr_sdk.adapters.vault_adapter import VaultAdapter
from levr_sdk.core.config import load_config
from levr_sdk.core.constants.chains import CHAIN_CODE_TO_ID, CHAIN_ID_BASE


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def _emit(ok: bool, result: Any) -> None:
    if ok:
        _echo_json({"ok": True, "result": _jsonable(result)})
        return
    _echo_json({"ok": False, "error": str(result)})
    sys.exit(1)


def _parse_chain(value: str) -> int:
    key = str(value).strip().lower()
    if key in CHAIN_CODE_TO_ID:
        return CHAIN_CODE_TO_ID[key]
    try:
        return int(key)
    except ValueError as exc:
        raise click.BadParameter(f"Unknown chain {value!r}") from exc


def _pricing(secondary_usd: str | None, primary_usd: str | None) -> Pricing | None:
    if secondary_usd is None or primary_usd is None:
        return None
    return Pricing(secondary_asset_usd=secondary_usd, primary_asset_usd=primary_usd)


_pricing_options = [
    click.option("--weth-usd", "secondary_usd", default=None, help="WETH price in USD."),
    click.option("--token-usd", "primary_usd", default=None, help="Token price in USD."),
]


def pricing_options(fn):
    for option in reversed(_pricing_options):
        fn = option(fn)
    return fn


@click.group(name="levr", help="Read Levr project state from chain.")
@click.option("--chain", "chain", default=str(CHAIN_ID_BASE), show_default=True)
@click.option("--config", "config_path", default=None, help="Path to config.json.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.pass_context
def levr_cli(ctx: click.Context, chain: str, config_path: str | None, log_level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=str(log_level).upper())
    if config_path:
        load_config(config_path, require_exists=True)
    ctx.ensure_object(dict)
    ctx.obj["chain_id"] = _parse_chain(chain)


@levr_cli.command(name="project", help="Full aggregate for one project token.")
@click.argument("token")
@pricing_options
@click.pass_context
def project_cmd(
    ctx: click.Context, token: str, secondary_usd: str | None, primary_usd: str | None
) -> None:
    adapter = ProjectAdapter(chain_id=ctx.obj["chain_id"])
    ok, result = asyncio.run(
        adapter.get_project(token, pricing=_pricing(secondary_usd, primary_usd))
    )
    _emit(ok, result)


@levr_cli.command(name="projects", help="List registered projects with summary stats.")
@click.option("--offset", type=int, default=0, show_default=True)
@click.option("--limit", type=int, default=20, show_default=True)
@click.pass_context
def projects_cmd(ctx: click.Context, offset: int, limit: int) -> None:
    adapter = ProjectAdapter(chain_id=ctx.obj["chain_id"])
    ok, result = asyncio.run(adapter.get_projects(offset=offset, limit=limit))
    _emit(ok, result)


@levr_cli.command(name="user", help="Wallet balances, stake and rewards for one project.")
@click.argument("token")
@click.argument("user")
@pricing_options
@click.pass_context
def user_cmd(
    ctx: click.Context,
    token: str,
    user: str,
    secondary_usd: str | None,
    primary_usd: str | None,
) -> None:
    adapter = ProjectAdapter(chain_id=ctx.obj["chain_id"])
    ok, result = asyncio.run(
        adapter.get_user(token, user, pricing=_pricing(secondary_usd, primary_usd))
    )
    _emit(ok, result)


@levr_cli.command(
    name="treasury-airdrop", help="Resolve the treasury airdrop allocation for a token."
)
@click.argument("token")
@click.option("--claimant", default=None, help="Defaults to the project treasury.")
@click.option("--decimals", type=int, default=18, show_default=True)
@click.pass_context
def treasury_airdrop_cmd(
    ctx: click.Context, token: str, claimant: str | None, decimals: int
) -> None:
    chain_id = ctx.obj["chain_id"]
    if claimant is None:
        ok, project = asyncio.run(ProjectAdapter(chain_id=chain_id).get_project(token))
        if not ok:
            _emit(False, project)
        if project is None:
            _emit(False, f"{token} is not a registered Levr project")
        claimant = project.addresses.treasury

    adapter = TreasuryAirdropAdapter(chain_id=chain_id)
    ok, result = asyncio.run(
        adapter.resolve_treasury_allocation(token, claimant, decimals=decimals)
    )
    _emit(ok, result)


@levr_cli.command(name="vault", help="Vault allocation and claimable amount for a token.")
@click.argument("token")
@click.pass_context
def vault_cmd(ctx: click.Context, token: str) -> None:
    adapter = VaultAdapter(chain_id=ctx.obj["chain_id"])
    ok, result = asyncio.run(adapter.get_vault_state(token))
    _emit(ok, result)


def main() -> None:
    levr_cli(obj={})


if __name__ == "__main__":
    main()
