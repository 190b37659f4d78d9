# cli.py - interactive catalog admin panel
import logging
import math
import sys
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box
from rich.markup import escape

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from catalog_sdk.client import ApiError, CatalogClient
from catalog_sdk.config import load_settings

logger = logging.getLogger(__name__)

console = Console()
settings = load_settings()
c = CatalogClient.from_settings(settings)


# Local read cache, re-fetched after every mutation
categories: List[Dict[str, Any]] = []
products: List[Dict[str, Any]] = []

status_message = "Ready"

category_form: Dict[str, str] = {"name": "", "description": ""}
product_form: Dict[str, Any] = {
    "name": "", "price": "", "description": "", "category_id": "", "editing_id": None,
}

ALERT_STYLES = {
    "success": "green",
    "info": "cyan",
    "warning": "yellow",
    "danger": "red",
}

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


# ---------------------------
# Utility functions
# ---------------------------
def show_alert(message: str, kind: str = "success") -> None:
    global status_message
    status_message = message
    style = ALERT_STYLES.get(kind, "white")
    console.print(Panel.fit(f"[{style}]{escape(message)}[/{style}]", title="Status", border_style=style))


def format_currency(amount) -> str:
    """Format an amount as Vietnamese dong, e.g. ``1.500.000 ₫``."""
    value = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if value < 0 else ""
    return f"{sign}{abs(value):,}".replace(",", ".") + "\u00a0₫"


def parse_price(raw) -> Optional[float]:
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_id(raw) -> Optional[int]:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def run_request(fn: Callable, *args, **kwargs):
    """Calls fn(*args, **kwargs) behind a spinner. Errors propagate to the caller."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return fn(*args, **kwargs)


# ---------------------------
# Category functions
# ---------------------------
def load_categories() -> None:
    global categories
    try:
        categories = run_request(c.list_categories) or []
        logger.debug("Loaded %d categories", len(categories))
    except ApiError as e:
        display_categories(error=str(e))
        return
    display_categories()


def display_categories(error: Optional[str] = None) -> None:
    table = Table(title="Categories", box=box.ROUNDED, header_style="bold cyan", show_lines=True)
    table.add_column("ID", style="dim", width=6)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Description", width=40)

    if error is not None:
        table.add_row("", f"[red]Error: {escape(error)}[/red]", "")
    elif not categories:
        table.add_row("", "[italic]No categories yet[/italic]", "")
    else:
        for cat in categories:
            table.add_row(str(cat.get("id")), escape(cat.get("name", "")), escape(cat.get("description") or ""))
    console.print(table)


def category_options() -> List[Tuple[Optional[int], str]]:
    return [(None, "Select category")] + [(cat.get("id"), cat.get("name", "")) for cat in categories]


def category_completer() -> WordCompleter:
    words = []
    for cid, name in category_options()[1:]:
        words.extend([name, str(cid)])
    return WordCompleter([w for w in words if w], ignore_case=True)


def resolve_category(raw: str) -> Optional[int]:
    """Map a typed category name or id to an id."""
    text = (raw or "").strip()
    if not text:
        return None
    for cid, name in category_options()[1:]:
        if text == str(cid) or text.lower() == (name or "").lower():
            return cid
    return parse_id(text)


def category_name(category_id) -> str:
    for cat in categories:
        if cat.get("id") == category_id:
            return cat.get("name", "")
    return "N/A"


def reset_category_form() -> None:
    category_form.update(name="", description="")


def add_category(name: str, description: str = "") -> None:
    name = (name or "").strip()
    description = (description or "").strip()

    if not name:
        show_alert("Please enter a category name!", "warning")
        return

    try:
        run_request(c.add_category, name, description)
    except ApiError as e:
        show_alert(f"Failed to add category: {e}", "danger")
        return
    reset_category_form()
    load_categories()
    show_alert("Category added successfully!")


def delete_category(category_id: int) -> None:
    if not Confirm.ask("Are you sure you want to delete this category?"):
        return

    try:
        run_request(c.delete_category, category_id)
    except ApiError as e:
        show_alert(f"Failed to delete category: {e}", "danger")
        return
    load_categories()
    # product rows show category names
    load_products()
    show_alert("Category deleted successfully!")


# ---------------------------
# Product functions
# ---------------------------
def load_products() -> None:
    global products
    try:
        products = run_request(c.list_products) or []
        logger.debug("Loaded %d products", len(products))
    except ApiError as e:
        display_products(error=str(e))
        return
    display_products()


def display_products(error: Optional[str] = None) -> None:
    table = Table(title="Products", box=box.ROUNDED, header_style="bold cyan", show_lines=True)
    table.add_column("ID", style="dim", width=6)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Price", justify="right", width=16)
    table.add_column("Description", width=30)
    table.add_column("Category", width=18)

    if error is not None:
        table.add_row("", f"[red]Error: {escape(error)}[/red]", "", "", "")
    elif not products:
        table.add_row("", "[italic]No products yet[/italic]", "", "", "")
    else:
        for prod in products:
            table.add_row(
                str(prod.get("id")),
                escape(prod.get("name", "")),
                format_currency(prod.get("price", 0)),
                escape(prod.get("description") or ""),
                f"[on grey23] {escape(category_name(prod.get('categoryId')))} [/]",
            )
    console.print(table)


def reset_product_form() -> None:
    product_form.update(name="", price="", description="", category_id="", editing_id=None)


def _read_product_input(name, price, description, category_id):
    name = (name or "").strip()
    description = (description or "").strip()
    price = parse_price(price)
    category_id = parse_id(category_id)
    if not name or not price or price < 0 or not category_id:
        show_alert("Please fill in all product fields!", "warning")
        return None
    return name, price, description, category_id


def add_product(name: str, price, description: str, category_id) -> None:
    fields = _read_product_input(name, price, description, category_id)
    if fields is None:
        return

    try:
        run_request(c.add_product, *fields)
    except ApiError as e:
        show_alert(f"Failed to add product: {e}", "danger")
        return
    reset_product_form()
    load_products()
    show_alert("Product added successfully!")


def edit_product(product_id: int) -> None:
    product = next((p for p in products if p.get("id") == product_id), None)
    if product is None:
        return

    product_form.update(
        name=product.get("name", ""),
        price=str(product.get("price", "")),
        description=product.get("description") or "",
        category_id=str(product.get("categoryId", "")),
        editing_id=product_id,
    )
    show_alert(f"Editing: {product.get('name', '')}", "info")


def update_product(product_id: int, name: str, price, description: str, category_id) -> None:
    fields = _read_product_input(name, price, description, category_id)
    if fields is None:
        return

    try:
        run_request(c.update_product, product_id, *fields)
    except ApiError as e:
        show_alert(f"Failed to update product: {e}", "danger")
        return
    reset_product_form()
    load_products()
    show_alert("Product updated successfully!")


def delete_product(product_id: int) -> None:
    if not Confirm.ask("Are you sure you want to delete this product?"):
        return

    try:
        run_request(c.delete_product, product_id)
    except ApiError as e:
        show_alert(f"Failed to delete product: {e}", "danger")
        return
    load_products()
    show_alert("Product deleted successfully!")


# ---------------------------
# Forms
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def submit_category_form() -> None:
    category_form["name"] = prompt_with_autocomplete("Category name", default=category_form["name"])
    category_form["description"] = prompt_with_autocomplete(
        "Description", default=category_form["description"])
    add_category(category_form["name"], category_form["description"])


def submit_product_form() -> None:
    product_form["name"] = prompt_with_autocomplete("Product name", default=product_form["name"])
    product_form["price"] = prompt_with_autocomplete("Price (VND)", default=str(product_form["price"]))
    product_form["description"] = prompt_with_autocomplete(
        "Description", default=product_form["description"])

    current = parse_id(product_form["category_id"])
    default = category_name(current) if current is not None else ""
    raw = prompt_with_autocomplete("Category", completer=category_completer(),
                                   default="" if default == "N/A" else default)
    resolved = resolve_category(raw)
    product_form["category_id"] = "" if resolved is None else str(resolved)

    args = (product_form["name"], product_form["price"],
            product_form["description"], product_form["category_id"])
    if product_form["editing_id"] is not None:
        update_product(product_form["editing_id"], *args)
    else:
        add_product(*args)


def ask_id(message: str, items: List[Dict[str, Any]]) -> Optional[int]:
    completer = WordCompleter([str(it.get("id")) for it in items], ignore_case=True)
    raw = prompt_with_autocomplete(message, completer=completer)
    value = parse_id(raw)
    if value is None:
        show_alert("Please enter a numeric id.", "warning")
    return value


# ---------------------------
# Layout and header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "Catalog Admin",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())

    load_categories()
    load_products()

    while True:
        editing = product_form["editing_id"]
        product_label = f"Update product #{editing}" if editing is not None else "Add product"

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "List categories", "5", product_label),
            ("2", "Add category", "6", "Edit product"),
            ("3", "Delete category", "7", "Cancel edit"),
            ("4", "List products", "8", "Delete product"),
            ("9", "Reload all", "q", "Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 10)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            load_categories()

        elif choice == "2":
            submit_category_form()

        elif choice == "3":
            cid = ask_id("Category ID to delete", categories)
            if cid is not None:
                delete_category(cid)

        elif choice == "4":
            load_products()

        elif choice == "5":
            submit_product_form()

        elif choice == "6":
            pid = ask_id("Product ID to edit", products)
            if pid is not None:
                edit_product(pid)

        elif choice == "7":
            reset_product_form()
            show_alert("Edit cancelled", "info")

        elif choice == "8":
            pid = ask_id("Product ID to delete", products)
            if pid is not None:
                delete_product(pid)

        elif choice == "9":
            load_categories()
            load_products()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye![/bold green]"))
                return

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    configure_logging(settings.log_level)
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
