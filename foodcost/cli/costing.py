"""Costing command handlers used by the unified CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from foodcost.application.workspace import CostingWorkspace
from foodcost.domain.catalog import CatalogItemNotFoundError
from foodcost.domain.pricing import PricingMethod
from foodcost.runtime import get_logger

logger = get_logger(__name__)


def _open_workspace() -> CostingWorkspace:
    return CostingWorkspace.open()


def _method(args: argparse.Namespace) -> PricingMethod:
    return PricingMethod(getattr(args, "method", None) or PricingMethod.COST_PERCENTAGE.value)


# --- catalog ---


def cmd_catalog_list(args: argparse.Namespace) -> int:
    ws = _open_workspace()
    symbol = ws.settings.currency_symbol
    if not len(ws.catalog):
        print("Market list is empty.")
        return 0
    for item in ws.catalog:
        print(f"{item.id:<32}  {item.name:<24}  {symbol}{item.price:,.2f} / {item.unit}")
    return 0


def cmd_catalog_add(args: argparse.Namespace) -> int:
    ws = _open_workspace()
    item = ws.catalog.add(name=args.name, price=args.price, unit=args.unit)
    print(f"Added {item.name} ({item.id})")
    return 0


def cmd_catalog_set(args: argparse.Namespace) -> int:
    ws = _open_workspace()
    try:
        item = ws.catalog.update(args.item_id, name=args.name, price=args.price, unit=args.unit)
    except CatalogItemNotFoundError:
        print(f"Error: catalog item not found: {args.item_id}")
        return 1
    print(f"Updated {item.name}: {ws.settings.currency_symbol}{item.price:,.2f} / {item.unit}")
    return 0


def cmd_catalog_remove(args: argparse.Namespace) -> int:
    ws = _open_workspace()
    try:
        ws.catalog.remove(args.item_id)
    except CatalogItemNotFoundError:
        print(f"Error: catalog item not found: {args.item_id}")
        return 1
    print(f"Removed {args.item_id}")
    return 0


# --- recipes ---


def cmd_recipes_list(args: argparse.Namespace) -> int:
    ws = _open_workspace()
    recipes = ws.recipes.list()
    if not recipes:
        print("No saved recipes.")
        return 0
    for recipe in recipes:
        created = recipe.created_at.strftime("%Y-%m-%d %H:%M")
        print(f"{recipe.id:<32}  {recipe.name:<30}  {created}  ({len(recipe.state.lines)} ingredients)")
    return 0


def cmd_recipes_show(args: argparse.Namespace) -> int:
    from foodcost.application.reporting import saved_recipe_report
    from foodcost.report import format_cost_report

    ws = _open_workspace()
    report = saved_recipe_report(ws, args.recipe_id, method=_method(args))
    if report is None:
        print(f"Error: recipe not found: {args.recipe_id}")
        return 1
    recipe = ws.recipes.get(args.recipe_id)
    assert recipe is not None
    print(recipe.name)
    print()
    print(format_cost_report(report, ws.settings.currency_symbol), end="")
    return 0


def cmd_recipes_delete(args: argparse.Namespace) -> int:
    ws = _open_workspace()
    if not ws.delete_recipe(args.recipe_id):
        print(f"Error: recipe not found: {args.recipe_id}")
        return 1
    print(f"Deleted {args.recipe_id}")
    return 0


# --- import / export ---


def cmd_import(args: argparse.Namespace) -> int:
    """Extract ingredients from a recipe text file, price them, print the report."""
    from foodcost.application.recipe_import import RecipeImportRequest, run_recipe_import
    from foodcost.application.reporting import run_cost_report
    from foodcost.report import format_cost_report

    text_path = Path(args.file)
    if not text_path.exists():
        print(f"Error: file not found: {text_path}")
        return 1

    ws = _open_workspace()
    ws.calculator.method = _method(args)
    result = run_recipe_import(RecipeImportRequest(workspace=ws, text=text_path.read_text(encoding="utf-8")))
    if result.status != "imported":
        logger.error("%s", result.error)
        print(result.error)
        return 1

    if args.yield_count is not None:
        ws.calculator.set_yield(args.yield_count)
    if args.selling_price is not None:
        ws.calculator.set_selling_price(args.selling_price)
    elif args.target_percentage is not None:
        ws.calculator.set_from_target_percentage(args.target_percentage)
    elif args.pricing_factor is not None:
        ws.calculator.set_from_pricing_factor(args.pricing_factor)

    print(f"Imported {result.imported} ingredients.")
    print()
    print(format_cost_report(run_cost_report(ws), ws.settings.currency_symbol), end="")

    if args.save:
        recipe = ws.save_recipe(args.save)
        print(f"\nSaved recipe {recipe.name!r} ({recipe.id})")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    from foodcost.application.reporting import run_recipe_export

    ws = _open_workspace()
    result = run_recipe_export(ws, args.recipe_id, Path(args.csv_path), method=_method(args))
    if result.status == "recipe_not_found":
        print(f"Error: {result.error}")
        return 1
    print(f"Wrote {result.path}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server for the costing workspace."""
    import uvicorn

    from foodcost.application.server import create_app

    print(f"Starting food cost server on {args.host}:{args.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0
