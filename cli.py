# cli.py - interactive catalog console
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.kasir import KasirClient

console = Console()
c = KasirClient(base_url=os.environ.get("KASIR_BASE_URL", "http://127.0.0.1:8080"))

status_message = "Ready"
category_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
})


# ---------------------------
# Display helpers
# ---------------------------
def format_rupiah(amount: int) -> str:
    return "Rp " + f"{amount:,}".replace(",", ".")


def category_name(category_id: int, categories: List[Dict[str, Any]]) -> str:
    for cat in categories:
        if cat.get("id") == category_id:
            return cat.get("name", "")
    return "No Category"


def show_products(products: List[Dict[str, Any]], categories: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Produk",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", justify="right", width=6)
    table.add_column("Nama", style="bold", width=24)
    table.add_column("Harga", justify="right", width=14)
    table.add_column("Stok", justify="right", width=8)
    table.add_column("Category", width=18)

    for p in products:
        stock = p.get("stok", 0)
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("nama", ""),
            format_rupiah(p.get("harga", 0)),
            f"[red]{stock}[/red]" if stock <= 0 else str(stock),
            category_name(p.get("category_id", 0), categories),
        )
    console.print(table)


def show_categories(categories: List[Dict[str, Any]]):
    if not categories:
        console.print("[italic yellow]No categories found[/italic yellow]")
        return

    table = Table(title="🏷️ Categories", box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", justify="right", width=6)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Description", width=40)
    for cat in categories:
        table.add_row(str(cat.get("id")), cat.get("name", ""), cat.get("description", ""))
    console.print(table)


def show_stats(stats: Dict[str, int]):
    console.print(Panel.fit(
        f"Products: [bold]{stats.get('total_products', 0)}[/bold]  "
        f"(last id {stats.get('last_product_id', 0)})\n"
        f"Categories: [bold]{stats.get('total_categories', 0)}[/bold]  "
        f"(last id {stats.get('last_category_id', 0)})",
        title="📊 Stats",
        border_style="green"
    ))


def show_status(message: str, ok: bool = True) -> Text:
    return Text(f"{'✔' if ok else '✖'} {message}", style="green" if ok else "red")


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after printing the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


# ---------------------------
# Input helpers
# ---------------------------
def refresh_categories() -> List[Dict[str, Any]]:
    global category_cache
    category_cache = try_api(c.list_categories) or []
    return category_cache


def get_category_completer():
    return WordCompleter([str(cat["id"]) for cat in category_cache], ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_product_fields(defaults: Optional[Dict[str, Any]] = None):
    defaults = defaults or {}
    name = prompt_with_autocomplete("Nama produk", default=defaults.get("nama", ""))
    price = IntPrompt.ask("💰 Harga", default=defaults.get("harga", 0))
    stock = IntPrompt.ask("📦 Stok", default=defaults.get("stok", 0))
    refresh_categories()
    raw_cat = prompt_with_autocomplete("🏷️ Category id", completer=get_category_completer(),
                                       default=str(defaults.get("category_id", 0)))
    try:
        category_id = int(raw_cat)
    except ValueError:
        category_id = 0
    return name, price, stock, category_id


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=24)
    header.add_column("center", width=40)
    header.add_column("right", width=24)
    header.add_row(
        "🧾 Kasir",
        "[bold blue]Product & Category Catalog[/bold blue]",
        f"[dim]{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())
    refresh_categories()

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=28)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=28)
        options = [
            ("1", "📦 List products", "6", "🏷️ List categories"),
            ("2", "🔍 Filter products", "7", "➕ Create category"),
            ("3", "➕ Create product", "8", "🗑️ Delete category"),
            ("4", "✏️ Update product", "9", "📊 Stats"),
            ("5", "🗑️ Delete product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 10)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                show_products(products, refresh_categories())

        elif choice == "2":
            nama = prompt_with_autocomplete("Nama contains")
            min_harga = IntPrompt.ask("Min harga (0 = none)", default=0)
            max_harga = IntPrompt.ask("Max harga (0 = none)", default=0)
            products = try_api(c.list_products, nama, min_harga, max_harga, success_msg="Filter applied")
            if products is not None:
                show_products(products, refresh_categories())

        elif choice == "3":
            name, price, stock, category_id = ask_product_fields()
            resp = try_api(c.create_product, name, price, stock, category_id,
                           success_msg=f"Product '{name}' created")
            if resp:
                show_products([resp], category_cache)

        elif choice == "4":
            pid = IntPrompt.ask("Product id")
            current = try_api(c.get_product, pid)
            if current:
                name, price, stock, category_id = ask_product_fields(current)
                resp = try_api(c.update_product, pid, name, price, stock, category_id,
                               success_msg=f"Product {pid} updated")
                if resp:
                    show_products([resp], category_cache)

        elif choice == "5":
            pid = IntPrompt.ask("Product id")
            if Confirm.ask(f"Delete product {pid}?"):
                try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")

        elif choice == "6":
            show_categories(refresh_categories())

        elif choice == "7":
            name = prompt_with_autocomplete("Category name")
            description = prompt_with_autocomplete("Description")
            resp = try_api(c.create_category, name, description, success_msg=f"Category '{name}' created")
            if resp:
                show_categories([resp])
                refresh_categories()

        elif choice == "8":
            refresh_categories()
            raw = prompt_with_autocomplete("Category id", completer=get_category_completer())
            if raw.strip().isdigit() and Confirm.ask(f"Delete category {raw}?"):
                try_api(c.delete_category, int(raw), success_msg=f"Category {raw} deleted")

        elif choice == "9":
            stats = try_api(c.stats)
            if stats:
                show_stats(stats)

        elif choice.lower() in ("q", "quit", "exit"):
            console.print(Panel.fit("[bold green]Terima kasih! 👋[/bold green]", title="Goodbye"))
            sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
