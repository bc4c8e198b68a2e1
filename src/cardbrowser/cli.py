"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .appctx import AppContext
from .application.services.pagination_controller import LoadState
from .domain.models.core import Card
from .domain.models.filters import CardFilters
from .errors import CardBrowserError
from .gui.services.continuation import ManualTrigger
from .gui.viewmodels.card_list_viewmodel import CardListViewModel

app = typer.Typer(help="Browse the card catalog page by page")
console = Console()
err_console = Console(stderr=True)

LOGGER = logging.getLogger(__name__)


def _create_context(settings_path: Optional[Path]) -> AppContext:
    return AppContext.from_path(settings_path)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CardBrowserError as exc:
            err_console.print(f"Error: {exc}")
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(
    ctx: typer.Context,
    settings: Optional[Path] = typer.Option(None, "--settings", help="Path to settings.json"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Catalog API base URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    try:
        context = _create_context(settings)
        if base_url:
            context.settings.set("api.base_url", base_url)
    except CardBrowserError as exc:
        err_console.print(f"Error: {exc}")
        raise typer.Exit(1) from exc
    _configure_logging("DEBUG" if verbose else context.settings.get("logging.level", "INFO"))
    ctx.obj = context


@app.command()
@_handle_errors
def partitions(ctx: typer.Context) -> None:
    """Print the partition traversal order."""

    context: AppContext = ctx.obj
    for index, code in enumerate(context.partitions(), start=1):
        console.print(f"{index:>3}  {code}")


@app.command()
@_handle_errors
def browse(
    ctx: typer.Context,
    pages: int = typer.Option(1, "--pages", "-n", min=1, help="Pages to load"),
    partition: Optional[List[str]] = typer.Option(
        None, "--partition", "-p", help="Partition code (repeatable); defaults to settings"
    ),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1),
) -> None:
    """Load cards expansion by expansion."""

    context: AppContext = ctx.obj
    sequence = partition or list(context.partitions())
    view = asyncio.run(_run(context, pages, lambda vm: vm.start(sequence, page_size)))
    _render(view)


@app.command()
@_handle_errors
def search(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name"),
    color: Optional[str] = typer.Option(None, "--color"),
    card_type: Optional[str] = typer.Option(None, "--type"),
    rarity: Optional[str] = typer.Option(None, "--rarity"),
    set_code: Optional[str] = typer.Option(None, "--set"),
    cost: Optional[int] = typer.Option(None, "--cost", min=0),
    power: Optional[int] = typer.Option(None, "--power", min=0),
    pages: int = typer.Option(1, "--pages", "-n", min=1, help="Pages to load"),
) -> None:
    """Search the catalog; with no filters this browses like ``browse``."""

    context: AppContext = ctx.obj
    filters = CardFilters(
        name=name,
        color=color,
        card_type=card_type,
        rarity=rarity,
        set_code=set_code,
        cost=cost,
        power=power,
    )
    sequence = list(context.partitions())

    async def _start(vm: CardListViewModel) -> bool:
        if filters.is_empty:
            return await vm.start(sequence)
        # Install the partition order first so an empty search has somewhere
        # to return to, without fetching it.
        vm.controller.initialize_partitions(sequence)
        return await vm.search(filters)

    view = asyncio.run(_run(context, pages, _start))
    _render(view)


async def _run(
    context: AppContext,
    pages: int,
    start: Callable[[CardListViewModel], Any],
) -> CardListViewModel:
    gateway = context.create_gateway()
    try:
        controller = context.create_controller(gateway)
        view = CardListViewModel(controller, context.event_bus)
        trigger = ManualTrigger()
        binder = context.create_binder(controller, trigger)
        sentinel = object()
        binder.bind(sentinel)
        await start(view)
        for _ in range(pages - 1):
            if controller.state is LoadState.EXHAUSTED:
                break
            trigger.fire(sentinel)
            await binder.drain()
        binder.unbind()
        view.dispose()
        return view
    finally:
        close = getattr(gateway, "close", None)
        if close is not None:
            await close()


def _render(view: CardListViewModel) -> None:
    if view.no_results.value:
        console.print("[yellow]No cards match these filters.")
        return
    cards: Sequence[Card] = view.cards.value
    if view.error_message.value and not cards:
        raise typer.Exit(1)
    table = Table(title=f"{len(cards)} cards")
    for column in ("Code", "Name", "Set", "Rarity", "Color", "Type"):
        table.add_column(column)
    for card in cards:
        table.add_row(
            card.code or card.id,
            card.name,
            card.set_code or "",
            card.rarity or "",
            card.color or "",
            card.card_type or "",
        )
    console.print(table)
    if view.state.value is LoadState.EXHAUSTED:
        console.print("[dim]End of catalog.")


if __name__ == "__main__":  # pragma: no cover
    app()
