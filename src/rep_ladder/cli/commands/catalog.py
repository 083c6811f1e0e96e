"""Catalog command: show the exercise difficulty ladders."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import ALL_CATEGORIES
from ...core.exercises.registry import get_catalog
from .. import views
from ..app import app, parse_category


@app.command()
def catalog(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only this category (push, pull or legs)"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON"),
    ] = False,
) -> None:
    """List exercise variations per category, easiest first."""
    cats = [parse_category(category)] if category is not None else list(ALL_CATEGORIES)
    ladders = {cat.value: get_catalog(cat) for cat in cats}

    if json_out:
        output = {
            name: [
                {
                    "id": v.id,
                    "name": v.name,
                    "difficulty": v.difficulty,
                    "is_standard": v.is_standard,
                    "cues": list(v.cues),
                }
                for v in ladder
            ]
            for name, ladder in ladders.items()
        }
        print(json.dumps(output, indent=2))
        return

    views.print_catalog(ladders)
