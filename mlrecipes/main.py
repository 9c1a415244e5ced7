"""
Command line entry point.

Lists the available recipes or runs one of them against a data directory.
"""

import argparse
import sys
from typing import List, Optional

from .config.settings import settings
from .config.logging import configure_logging, get_logger
from .config.exceptions import MLRecipesError, RecipeNotFoundError
from .recipes import RECIPES, get_recipe

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNKNOWN_RECIPE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mlrecipes", description="Run machine learning recipes")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: MLRECIPES_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List available recipes")

    run_parser = subparsers.add_parser("run", help="Run a recipe")
    run_parser.add_argument("name", help="Recipe name (see 'mlrecipes list')")
    run_parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding the recipe's data files (default: MLRECIPES_DATA_DIR)",
    )
    run_parser.add_argument("--log-level", dest="run_log_level", default=None, help=argparse.SUPPRESS)
    return parser


def list_recipes() -> int:
    width = max(len(name) for name in RECIPES)
    for name, recipe in RECIPES.items():
        print(f"{name:<{width}}  {recipe.description}")
    return EXIT_OK


def run_recipe(name: str, data_dir: Optional[str] = None) -> int:
    try:
        recipe_class = get_recipe(name)
    except RecipeNotFoundError as e:
        logger.error("Recipe not found", recipe=name)
        print(str(e), file=sys.stderr)
        return EXIT_UNKNOWN_RECIPE

    try:
        recipe_class(data_dir=data_dir).run()
    except MLRecipesError as e:
        logger.error("Recipe failed", recipe=name, error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = getattr(args, "run_log_level", None) or args.log_level
    configure_logging(log_level)

    try:
        settings.validate_on_startup()
    except MLRecipesError as e:
        logger.error("Configuration validation failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.command == "list":
        return list_recipes()
    return run_recipe(args.name, args.data_dir)


if __name__ == "__main__":
    sys.exit(main())
