"""
Command-line interface for Recipe Store.

Provides the `recipes` command with the following subcommands:
- list: Show all recipes sorted by name
- show: Show one recipe, optionally scaled to another serving count
- search: Search recipes by name, ingredient, or both
- add: Add a recipe and save the file
- remove: Remove a recipe and save the file
- cart: Build a shopping cart from several recipes
- validate: Check a recipes file without loading it
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .config import load_config, resolve_recipes_file
from .errors import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    ConfigurationError,
    RecipeStoreError,
)
from .io import load_recipes, save_recipes
from .logging_config import setup_logging
from .models import Recipe, RecipeBook, sort_by_name
from .rendering import render_cart, render_recipe, render_recipe_list, render_search
from .validate import validate_recipes_file

# Set up module logger
logger = logging.getLogger(__name__)


def _load_book(args: argparse.Namespace, missing_ok: bool = False) -> RecipeBook:
    path: Path = args.recipes_file
    if missing_ok and not path.exists():
        logger.info(f"{path} does not exist yet, starting with an empty collection")
        return RecipeBook()
    return load_recipes(path)


def _find_recipe(book: RecipeBook, name: str) -> Optional[Recipe]:
    """Exact name match first, then the first partial match."""
    recipe = book.get_recipe(name)
    if recipe is not None:
        return recipe
    matches = book.search_by_name(name)
    if len(matches) > 1:
        logger.warning(f"Multiple recipes match '{name}'; using '{matches[0].name}'")
    return matches[0] if matches else None


def list_command(args: argparse.Namespace) -> int:
    """Execute the list command."""
    book = _load_book(args)
    print(render_recipe_list(sort_by_name(book.all_recipes())), end="")
    return EXIT_SUCCESS


def show_command(args: argparse.Namespace) -> int:
    """Execute the show command."""
    book = _load_book(args)
    recipe = _find_recipe(book, args.name)
    if recipe is None:
        logger.error(f"No recipe found matching '{args.name}'")
        return EXIT_ERROR

    if args.servings is not None:
        try:
            recipe = recipe.scaled(args.servings)
        except ValueError as e:
            logger.error(f"Cannot scale '{recipe.name}': {e}")
            return EXIT_VALIDATION_ERROR

    print(render_recipe(recipe), end="")
    return EXIT_SUCCESS


def search_command(args: argparse.Namespace) -> int:
    """Execute the search command."""
    book = _load_book(args)
    if args.by == "name":
        results = book.search_by_name(args.query)
    elif args.by == "ingredient":
        results = book.search_by_ingredient(args.query)
    else:
        results = book.search_multi_token(args.query)

    logger.debug(f"Search '{args.query}' by {args.by}: {len(results)} result(s)")
    print(render_search(args.query, results), end="")
    return EXIT_SUCCESS


def add_command(args: argparse.Namespace) -> int:
    """
    Execute the add command.

    The file is only rewritten once the new recipe is complete.
    """
    book = _load_book(args, missing_ok=True)

    try:
        recipe = Recipe(args.name, args.servings)
    except ValueError as e:
        logger.error(f"Invalid recipe: {e}")
        return EXIT_VALIDATION_ERROR

    for name, amount in args.ingredients or []:
        recipe.add_ingredient(name, amount)

    if book.get_recipe(recipe.name) is not None:
        logger.warning(f"A recipe named '{recipe.name}' already exists; adding another")

    book.add_recipe(recipe)
    save_recipes(book, args.recipes_file)
    print(f"✅ Added '{recipe.name}' ({recipe.total_ingredient_count()} ingredients)")
    return EXIT_SUCCESS


def remove_command(args: argparse.Namespace) -> int:
    """Execute the remove command."""
    book = _load_book(args)
    if not book.remove_recipe(args.name):
        logger.error(f"No recipe named '{args.name}'")
        return EXIT_ERROR

    save_recipes(book, args.recipes_file)
    print(f"✅ Removed '{args.name}'")
    return EXIT_SUCCESS


def cart_command(args: argparse.Namespace) -> int:
    """Execute the cart command."""
    book = _load_book(args)

    selected: List[Recipe] = []
    for name in args.names:
        recipe = _find_recipe(book, name)
        if recipe is None:
            logger.warning(f"Recipe not found: {name}")
            continue
        selected.append(recipe)

    if not selected:
        logger.error("No valid recipes selected for shopping cart")
        return EXIT_ERROR

    print(render_cart(selected), end="")
    return EXIT_SUCCESS


def validate_command(args: argparse.Namespace) -> int:
    """Execute the validate command."""
    path = Path(args.path) if args.path else args.recipes_file
    if not path.exists():
        raise ConfigurationError(f"Recipes file not found: {path}")

    report = validate_recipes_file(path)
    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(report.format_text())

    return EXIT_SUCCESS if report.is_valid else EXIT_VALIDATION_ERROR


def parse_ingredient_arg(value: str) -> Tuple[str, float]:
    """
    Parse ``NAME=AMOUNT`` from the command line.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed, the name is
            blank or the amount is not a positive number.
    """
    name, sep, amount_text = value.rpartition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=AMOUNT, got '{value}'")
    try:
        amount = float(amount_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid amount '{amount_text}'")
    if not math.isfinite(amount) or amount <= 0:
        raise argparse.ArgumentTypeError(f"amount must be greater than 0, got '{amount_text}'")
    return name.strip(), amount


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="recipes",
        description="Manage a collection of recipes stored in a JSON file.",
        epilog="Example: recipes --file recipes.json show 'Garlic Soup' --servings 2",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"recipes {__version__}"
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (INFO level logging)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output (DEBUG level logging)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output except errors"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        dest="config_file",
        help="Path to config file (default: recipe_store.toml)"
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        dest="file",
        help="Recipes file (default: $RECIPE_STORE_FILE, config, or recipes.json)"
    )

    # Subcommands
    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands"
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List all recipes sorted by name",
    )
    list_parser.set_defaults(func=list_command)

    show_parser = subparsers.add_parser(
        "show",
        help="Show a recipe",
        description="Show a recipe's ingredients, optionally scaled."
    )
    show_parser.add_argument("name", help="Recipe name (exact, or the first partial match)")
    show_parser.add_argument(
        "--servings", "-s",
        type=int,
        help="Scale the ingredient amounts to this many servings"
    )
    show_parser.set_defaults(func=show_command)

    search_parser = subparsers.add_parser(
        "search",
        help="Search recipes",
        description="Case-insensitive partial search over recipe and ingredient names."
    )
    search_parser.add_argument("query", help="Search text")
    search_parser.add_argument(
        "--by",
        choices=["name", "ingredient", "all"],
        default="all",
        help="What to match against; 'all' requires every word to match (default: all)"
    )
    search_parser.set_defaults(func=search_command)

    add_parser = subparsers.add_parser(
        "add",
        help="Add a recipe",
        description="Add a recipe to the recipes file."
    )
    add_parser.add_argument("name", help="Recipe name")
    add_parser.add_argument(
        "--servings", "-s",
        type=int,
        required=True,
        help="Number of servings"
    )
    add_parser.add_argument(
        "--ingredient", "-i",
        type=parse_ingredient_arg,
        action="append",
        dest="ingredients",
        metavar="NAME=AMOUNT",
        help="Ingredient and amount; repeat for each ingredient"
    )
    add_parser.set_defaults(func=add_command)

    remove_parser = subparsers.add_parser(
        "remove",
        help="Remove a recipe",
    )
    remove_parser.add_argument("name", help="Exact recipe name")
    remove_parser.set_defaults(func=remove_command)

    cart_parser = subparsers.add_parser(
        "cart",
        help="Build a shopping cart",
        description="Sum the ingredients of the given recipes."
    )
    cart_parser.add_argument("names", nargs="+", help="Recipe names")
    cart_parser.set_defaults(func=cart_command)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a recipes file",
        description="Check a recipes file and report the first problem found."
    )
    validate_parser.add_argument(
        "path",
        nargs="?",
        help="File to check (default: the configured recipes file)"
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    validate_parser.set_defaults(func=validate_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config_file) if args.config_file else None
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        setup_logging(verbose=args.verbose, debug=args.debug, quiet=args.quiet)
        logger.error(f"Config error: {e}")
        return EXIT_CONFIG_ERROR

    log_file = config.resolve(config.logging.log_file) if config.logging.log_file else None
    setup_logging(
        verbose=args.verbose,
        debug=args.debug,
        quiet=args.quiet,
        log_file=log_file,
        default_level=config.logging.level,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_SUCCESS

    args.recipes_file = resolve_recipes_file(config, args.file)
    logger.debug(f"Recipes file: {args.recipes_file}")

    try:
        return args.func(args)
    except RecipeStoreError as e:
        logger.error(e.message)
        return e.exit_code


def main_cli() -> None:
    """
    CLI entry point for the ``recipes`` console script.

    Calls main() and exits with the returned code.
    """
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
