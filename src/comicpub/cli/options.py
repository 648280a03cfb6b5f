# ABOUTME: Shared Click options for comicpub CLI commands.
# ABOUTME: Provides a reusable decorator for the book metadata flags.

from collections.abc import Callable

import click

from comicpub.metadata.types import DEFAULT_LANGUAGE, ComicMetadata

_METADATA_OPTIONS = [
    click.option("--title", default=None, help="Book title (default: directory name)."),
    click.option("--author", default="Author name", show_default=True, help="Author name."),
    click.option("--publisher", default="Publisher name", show_default=True, help="Publisher."),
    click.option("--language", default=DEFAULT_LANGUAGE, show_default=True, help="Language tag."),
    click.option("--id", "book_id", default=None, help="Unique identifier (default: random UUID)."),
    click.option("--description", default=None, help="Book description."),
    click.option("--series", default=None, help="Series name."),
    click.option("--tag", "tags", multiple=True, help="Subject tag; repeat for several."),
    click.option(
        "--meta", "custom", multiple=True, metavar="KEY=VALUE",
        help="Custom metadata entry; repeat for several.",
    ),
    click.option(
        "--rtl/--ltr", "right_to_left", default=False,
        help="Reading direction (default: left to right).",
    ),
]


def metadata_options(func: Callable) -> Callable:
    """Attach every metadata flag to a command."""
    for option in reversed(_METADATA_OPTIONS):
        func = option(func)
    return func


def _parse_custom(entries: tuple[str, ...]) -> dict[str, str]:
    custom: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {entry!r}", param_hint="--meta")
        custom[key.strip()] = value
    return custom


def metadata_from_options(default_title: str, **options) -> ComicMetadata:
    """Build ComicMetadata from the values collected by metadata_options."""
    metadata = ComicMetadata(
        title=options["title"] if options["title"] is not None else default_title,
        author=options["author"],
        publisher=options["publisher"],
        language=options["language"],
        description=options["description"],
        series=options["series"],
        tags=set(options["tags"]),
        custom=_parse_custom(options["custom"]),
        right_to_left=options["right_to_left"],
    )
    if options["book_id"] is not None:
        metadata.id = options["book_id"]
    return metadata
