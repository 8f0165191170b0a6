"""
Jinja2 environment and text rendering for Recipe Store.

Templates live in the package's ``templates/`` directory and produce the
plain-text views printed by the CLI.
"""

import logging
from typing import Any, Iterable, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined
from jinja2.exceptions import TemplateError as JinjaTemplateError

from .errors import TemplateError
from .models import Recipe, format_amount
from .shopping_cart import ShoppingCart

logger = logging.getLogger(__name__)

_env: Optional[Environment] = None


def create_jinja_env() -> Environment:
    """
    Create a Jinja2 environment for the text templates.

    Returns:
        Configured Jinja2 Environment with the ``amount`` filter registered.
    """
    env = Environment(
        loader=PackageLoader("recipe_store", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["amount"] = format_amount
    logger.debug("Created Jinja2 environment for recipe templates")
    return env


def get_env() -> Environment:
    global _env
    if _env is None:
        _env = create_jinja_env()
    return _env


def render(template_name: str, **context: Any) -> str:
    """
    Render a template by name.

    Raises:
        TemplateError: If the template is missing or fails to render.
    """
    try:
        return get_env().get_template(template_name).render(**context)
    except JinjaTemplateError as e:
        raise TemplateError(f"Failed to render {template_name}: {e}")


def render_recipe(recipe: Recipe) -> str:
    return render("recipe.txt", recipe=recipe)


def render_recipe_list(recipes: Iterable[Recipe]) -> str:
    return render("recipe_list.txt", recipes=list(recipes))


def render_search(query: str, recipes: Iterable[Recipe]) -> str:
    return render("search.txt", query=query, recipes=list(recipes))


def render_cart(recipes: Iterable[Recipe]) -> str:
    recipes = list(recipes)
    cart = ShoppingCart(recipes)
    return render("cart.txt", recipes=recipes, items=cart.items())
