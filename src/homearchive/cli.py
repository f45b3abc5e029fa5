"""Command-line interface for homearchive.

Built with Typer for commands and Rich for output.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import get_config
from .db import get_db
from .db.schemas import BookCreate, CategoryCreate, PhysicalLocation
from .library import LibraryManager
from .search import (
    SearchError,
    SearchHistoryManager,
    SearchManager,
    SearchQuery,
    SortBy,
    SortOrder,
)

# Create the main app
app = typer.Typer(
    name="homearchive",
    help="Search and organize your home book archive.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
categories_app = typer.Typer(help="Manage book categories.")
app.add_typer(categories_app, name="categories")

library_app = typer.Typer(help="Manage a user's personal library.")
app.add_typer(library_app, name="library")

history_app = typer.Typer(help="Search history and suggestions.")
app.add_typer(history_app, name="history")

# Rich consoles for pretty output
console = Console()
err_console = Console(stderr=True)


# ============================================================================
# Helper Functions
# ============================================================================


def configure_logging(level: str) -> None:
    """Send package logs to stderr through Rich."""
    logger = logging.getLogger("homearchive")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def format_results_table(items: list, title: str, show_owned: bool = False) -> Table:
    """Create a rich table for displaying search results."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Genre", style="yellow")
    table.add_column("Year", justify="center")
    table.add_column("Location")
    if show_owned:
        table.add_column("Owned", justify="center")
    table.add_column("ID", style="dim")

    for item in items:
        location = (
            PhysicalLocation.from_string(item.physical_location).display_name
            if item.physical_location
            else "-"
        )
        row = [
            item.title,
            item.author,
            item.genre or "-",
            str(item.publication_year) if item.publication_year else "-",
            location,
        ]
        if show_owned:
            row.append("✓" if item.in_user_library else "")
        row.append(item.id)
        table.add_row(*row)

    return table


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Search and organize your home book archive."""
    configure_logging("DEBUG" if verbose else get_config().log_level)


# ============================================================================
# Search Commands
# ============================================================================


@app.command()
def search(
    query: str = typer.Argument("", help="Search text; empty lists every book"),
    sort_by: SortBy = typer.Option(SortBy.RELEVANCE, "--sort", "-s", help="Sort field"),
    sort_order: SortOrder = typer.Option(SortOrder.DESC, "--order", "-o", help="Sort direction"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Max results (1-50)"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Filter by author"),
    category: Optional[int] = typer.Option(None, "--category", "-c", help="Filter by category ID"),
    year_from: Optional[int] = typer.Option(None, "--year-from", help="Earliest publication year"),
    year_to: Optional[int] = typer.Option(None, "--year-to", help="Latest publication year"),
    min_rating: Optional[float] = typer.Option(None, "--min-rating", help="Minimum average rating"),
    location: Optional[PhysicalLocation] = typer.Option(
        None, "--location", help="Filter by physical location"
    ),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Mark books this user owns"),
) -> None:
    """Search books by title, author, genre, ISBN, publisher or description."""
    config = get_config()
    db = get_db()

    search_query = SearchQuery(
        query=query,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit if limit is not None else config.default_limit,
        author=author,
        category=category,
        year_from=year_from,
        year_to=year_to,
        min_rating=min_rating,
        physical_location=location,
    )

    try:
        response = SearchManager(db).search(search_query, user_id=user)
    except SearchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if config.record_history:
        SearchHistoryManager(db).record(response.query, response.total_results, user_id=user)

    if response.no_results:
        if response.query:
            console.print(f"[dim]No books found matching: {response.query}[/dim]")
        else:
            console.print("[dim]No books found[/dim]")
        return

    title = f"Search: {response.query}" if response.query else "All Books"
    console.print(format_results_table(response.results, title, show_owned=user is not None))
    if response.has_more:
        print_info(f"Showing {response.result_count} of {response.total_results} books")
    else:
        print_info(f"Found {response.total_results} book(s)")


@app.command()
def similar(
    book_id: str = typer.Argument(..., help="Reference book ID"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max results"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Mark books this user owns"),
) -> None:
    """Find books by the same author or in the same category."""
    db = get_db()
    try:
        items = SearchManager(db).find_similar(book_id, limit=limit, user_id=user)
    except SearchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not items:
        console.print("[dim]No similar books found[/dim]")
        return

    reference = db.get_book(book_id)
    title = f"Similar to: {reference.title}" if reference else "Similar Books"
    console.print(format_results_table(items, title, show_owned=user is not None))


def _field_search(field_name: str, value: str, limit: int, user: Optional[str]) -> None:
    """Run a single-field search and print the results."""
    manager = SearchManager(get_db())
    search_fn = getattr(manager, f"search_by_{field_name}")
    try:
        items = search_fn(value, limit=limit, user_id=user)
    except SearchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not items:
        console.print(f"[dim]No books found matching {field_name}: {value}[/dim]")
        return

    table_title = f"{field_name.capitalize()}: {value}"
    console.print(format_results_table(items, table_title, show_owned=user is not None))
    print_info(f"Found {len(items)} book(s)")


@app.command("by-title")
def by_title(
    title: str = typer.Argument(..., help="Text the title must contain"),
    limit: int = typer.Option(50, "--limit", "-l", help="Max results"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Mark books this user owns"),
) -> None:
    """List books whose title contains the text, ordered by title."""
    _field_search("title", title, limit, user)


@app.command("by-author")
def by_author(
    author: str = typer.Argument(..., help="Text the author must contain"),
    limit: int = typer.Option(50, "--limit", "-l", help="Max results"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Mark books this user owns"),
) -> None:
    """List books whose author contains the text, ordered by author."""
    _field_search("author", author, limit, user)


@app.command("by-genre")
def by_genre(
    genre: str = typer.Argument(..., help="Text the genre must contain"),
    limit: int = typer.Option(50, "--limit", "-l", help="Max results"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Mark books this user owns"),
) -> None:
    """List books whose genre contains the text, ordered by title."""
    _field_search("genre", genre, limit, user)


# ============================================================================
# Book Management Commands
# ============================================================================


@app.command()
def add(
    title: str = typer.Option(..., "--title", "-t", help="Book title"),
    author: str = typer.Option(..., "--author", "-a", help="Author name"),
    genre: Optional[str] = typer.Option(None, "--genre", "-g", help="Genre"),
    isbn: Optional[str] = typer.Option(None, "--isbn", "-i", help="ISBN"),
    publisher: Optional[str] = typer.Option(None, "--publisher", help="Publisher"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Publication year"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    pages: Optional[int] = typer.Option(None, "--pages", "-p", help="Page count"),
    location: Optional[PhysicalLocation] = typer.Option(
        None, "--location", help="Where the book is shelved"
    ),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category name"),
) -> None:
    """Add a book to the archive."""
    db = get_db()

    category_id = None
    if category:
        existing = db.get_category_by_name(category)
        if not existing:
            print_error(f"Category not found: {category}")
            raise typer.Exit(1)
        category_id = existing.id

    book = db.create_book(
        BookCreate(
            title=title,
            author=author,
            genre=genre,
            isbn=isbn,
            publisher=publisher,
            publication_year=year,
            description=description,
            page_count=pages,
            physical_location=location,
            category_id=category_id,
        )
    )
    print_success(f"Added: {book.title} by {book.author}")
    print_info(f"ID: {book.id}")


@app.command()
def locations() -> None:
    """List the physical locations books can be shelved in."""
    table = Table(title="Physical Locations", show_header=True, header_style="bold magenta")
    table.add_column("Value", style="cyan")
    table.add_column("Name", style="green")
    for loc in PhysicalLocation:
        table.add_row(loc.value, loc.display_name)
    console.print(table)


# ============================================================================
# Category Commands
# ============================================================================


@categories_app.command("add")
def categories_add(
    name: str = typer.Argument(..., help="Category name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
) -> None:
    """Create a category."""
    db = get_db()
    if db.get_category_by_name(name):
        print_error(f"Category already exists: {name}")
        raise typer.Exit(1)

    created = db.create_category(CategoryCreate(name=name, description=description))
    print_success(f"Created category: {created.name} (ID {created.id})")


@categories_app.command("list")
def categories_list() -> None:
    """List categories."""
    categories = get_db().list_categories()
    if not categories:
        console.print("[dim]No categories yet[/dim]")
        return

    table = Table(title="Categories", show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for cat in categories:
        table.add_row(str(cat.id), cat.name, cat.description or "")
    console.print(table)


# ============================================================================
# Personal Library Commands
# ============================================================================


@library_app.command("add")
def library_add(
    user: str = typer.Argument(..., help="User ID"),
    book_id: str = typer.Argument(..., help="Book ID"),
) -> None:
    """Add a book to a user's library."""
    try:
        LibraryManager(get_db()).add_book(user, book_id)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Added book {book_id} to {user}'s library")


@library_app.command("remove")
def library_remove(
    user: str = typer.Argument(..., help="User ID"),
    book_id: str = typer.Argument(..., help="Book ID"),
) -> None:
    """Remove a book from a user's library."""
    if not LibraryManager(get_db()).remove_book(user, book_id):
        print_error(f"Book {book_id} is not in {user}'s library")
        raise typer.Exit(1)
    print_success(f"Removed book {book_id} from {user}'s library")


@library_app.command("list")
def library_list(user: str = typer.Argument(..., help="User ID")) -> None:
    """List the books a user owns."""
    books = LibraryManager(get_db()).get_books(user)
    if not books:
        console.print(f"[dim]{user}'s library is empty[/dim]")
        return

    table = Table(title=f"{user}'s Library", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("ID", style="dim")
    for book in books:
        table.add_row(book.title, book.author, book.id)
    console.print(table)


# ============================================================================
# History Commands
# ============================================================================


@history_app.command("popular")
def history_popular(
    limit: int = typer.Option(10, "--limit", "-l", help="Max queries"),
) -> None:
    """Show the most searched queries."""
    popular = SearchHistoryManager(get_db()).popular_queries(limit)
    if not popular:
        console.print("[dim]No searches recorded yet[/dim]")
        return

    table = Table(title="Popular Searches", show_header=True, header_style="bold magenta")
    table.add_column("Query", style="cyan")
    table.add_column("Searches", justify="right")
    for item in popular:
        table.add_row(item.query, str(item.count))
    console.print(table)


@history_app.command("suggest")
def history_suggest(
    partial: str = typer.Argument("", help="Start of a query"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max suggestions"),
) -> None:
    """Suggest queries from search history."""
    suggestions = SearchHistoryManager(get_db()).suggestions(partial, limit)
    if not suggestions:
        console.print("[dim]No suggestions[/dim]")
        return
    for suggestion in suggestions:
        console.print(suggestion)


@history_app.command("recent")
def history_recent(
    user: str = typer.Argument(..., help="User ID"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max entries"),
) -> None:
    """Show a user's recent searches."""
    items = SearchHistoryManager(get_db()).recent_for_user(user, limit)
    if not items:
        console.print(f"[dim]No searches recorded for {user}[/dim]")
        return
    for item in items:
        console.print(
            f"{item.searched_at:%Y-%m-%d %H:%M}  {item.query}  [dim]({item.result_count} results)[/dim]"
        )


@history_app.command("clear")
def history_clear(user: str = typer.Argument(..., help="User ID")) -> None:
    """Clear a user's search history."""
    removed = SearchHistoryManager(get_db()).clear_for_user(user)
    print_success(f"Removed {removed} search(es)")


# ============================================================================
# Utility Commands
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"homearchive version {__version__}")


if __name__ == "__main__":
    app()
