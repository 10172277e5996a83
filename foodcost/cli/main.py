"""Unified command-line interface for the food cost calculator.

Usage:
    foodcost catalog list
    foodcost catalog add NAME PRICE UNIT
    foodcost catalog set ID [--name] [--price] [--unit]
    foodcost catalog remove ID
    foodcost recipes list|show ID|delete ID
    foodcost import FILE [--selling-price | --target-percentage | --pricing-factor] [--yield] [--save NAME]
    foodcost export ID CSV_PATH
    foodcost serve [--host] [--port]
"""

import argparse
from collections.abc import Sequence

from foodcost.domain.pricing import PricingMethod

_METHOD_CHOICES = [m.value for m in PricingMethod]


def _add_method_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--method",
        choices=_METHOD_CHOICES,
        default=PricingMethod.COST_PERCENTAGE.value,
        help="Pricing method shown in the summary (default: costPercentage)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="foodcost",
        description="Recipe food cost calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  catalog list|add|set|remove   Manage the market price list
  recipes list|show|delete      Manage saved recipes
  import FILE                   Extract ingredients from recipe text and cost them
  export ID CSV_PATH            Write a saved recipe's cost report as CSV
  serve [--host] [--port]       Start the HTTP server

Data lives in ~/.foodcost (override with FOODCOST_HOME).
""",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # catalog
    catalog_parser = subparsers.add_parser("catalog", help="Manage the market price list")
    catalog_sub = catalog_parser.add_subparsers(dest="catalog_command", help="Catalog command")
    catalog_sub.add_parser("list", help="List market items")
    add_parser = catalog_sub.add_parser("add", help="Add a market item")
    add_parser.add_argument("name", help="Item name")
    add_parser.add_argument("price", help="Price per purchase unit")
    add_parser.add_argument("unit", help="Purchase unit (kg, g, liter, ml, pc, ...)")
    set_parser = catalog_sub.add_parser("set", help="Change a market item")
    set_parser.add_argument("item_id", help="Catalog item id")
    set_parser.add_argument("--name", default=None)
    set_parser.add_argument("--price", default=None)
    set_parser.add_argument("--unit", default=None)
    remove_parser = catalog_sub.add_parser("remove", help="Remove a market item")
    remove_parser.add_argument("item_id", help="Catalog item id")

    # recipes
    recipes_parser = subparsers.add_parser("recipes", help="Manage saved recipes")
    recipes_sub = recipes_parser.add_subparsers(dest="recipes_command", help="Recipes command")
    recipes_sub.add_parser("list", help="List saved recipes")
    show_parser = recipes_sub.add_parser("show", help="Print a saved recipe's cost report")
    show_parser.add_argument("recipe_id", help="Saved recipe id")
    _add_method_option(show_parser)
    delete_parser = recipes_sub.add_parser("delete", help="Delete a saved recipe")
    delete_parser.add_argument("recipe_id", help="Saved recipe id")

    # import
    import_parser = subparsers.add_parser("import", help="Extract ingredients from a recipe text file")
    import_parser.add_argument("file", help="Path to a text file containing the recipe")
    pricing = import_parser.add_mutually_exclusive_group()
    pricing.add_argument("--selling-price", dest="selling_price", default=None)
    pricing.add_argument("--target-percentage", dest="target_percentage", default=None)
    pricing.add_argument("--pricing-factor", dest="pricing_factor", default=None)
    import_parser.add_argument("--yield", dest="yield_count", default=None, help="Number of servings")
    import_parser.add_argument("--save", default=None, metavar="NAME", help="Save the result as a recipe")
    _add_method_option(import_parser)

    # export
    export_parser = subparsers.add_parser("export", help="Write a saved recipe's cost report as CSV")
    export_parser.add_argument("recipe_id", help="Saved recipe id")
    export_parser.add_argument("csv_path", help="Destination CSV path")
    _add_method_option(export_parser)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    from foodcost.cli import costing

    if args.command == "catalog":
        handlers = {
            "list": costing.cmd_catalog_list,
            "add": costing.cmd_catalog_add,
            "set": costing.cmd_catalog_set,
            "remove": costing.cmd_catalog_remove,
        }
        handler = handlers.get(args.catalog_command)
    elif args.command == "recipes":
        handlers = {
            "list": costing.cmd_recipes_list,
            "show": costing.cmd_recipes_show,
            "delete": costing.cmd_recipes_delete,
        }
        handler = handlers.get(args.recipes_command)
    elif args.command == "import":
        handler = costing.cmd_import
    elif args.command == "export":
        handler = costing.cmd_export
    elif args.command == "serve":
        handler = costing.cmd_serve
    else:
        handler = None

    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
