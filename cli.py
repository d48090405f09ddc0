# cli.py
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.flatstore import StoreClient
import requests

console = Console()
c = StoreClient(base_url=os.getenv("FLATSTORE_API_URL", "http://127.0.0.1:3000"))


# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
cart_cache = set()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def _error_text(e: Exception) -> str:
    """
    Pull the server's {"error": ...} message out of an HTTPError when there is one.
    """
    if isinstance(e, requests.HTTPError) and e.response is not None:
        try:
            return e.response.json().get("error", str(e))
        except ValueError:
            return f"HTTP {e.response.status_code}"
    return str(e)


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=6)
    table.add_column("Title", style="bold", width=20)
    table.add_column("Code", width=10)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=8)
    table.add_column("Category", width=15)
    table.add_column("Active", width=8)

    for p in products:
        price = p.get("price")
        status = p.get("status")
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("title") or "N/A",
            p.get("code") or "-",
            f"${price:.2f}" if isinstance(price, (int, float)) else "-",
            str(p.get("stock") if p.get("stock") is not None else "-"),
            p.get("category") or "-",
            "[green]yes[/green]" if status else "[red]no[/red]" if status is not None else "-",
        )
    console.print(table)


def show_cart(cart_id: str, items: List[Dict[str, Any]]):
    title = Text()
    title.append("🛒 Cart ", style="bold")
    title.append(str(cart_id), style="bold cyan")

    if not items:
        console.print(Panel("This cart is empty 🛍️", title=title, style="blue"))
        return

    known = {str(p.get("id")): p for p in product_cache}
    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("Product", style="bold", width=30)
    table.add_column("Qty", justify="right", width=8)

    for it in items:
        pid = str(it.get("product", "?"))
        prod = known.get(pid)
        label = f"{pid} · {prod.get('title')}" if prod and prod.get("title") else pid
        if prod is None:
            # carts may reference products that do not exist
            label = f"[red]{pid} (unknown product)[/red]"
        table.add_row(label, str(it.get("quantity", 0)))

    console.print(Panel(table, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner. Returns the decoded result or None on failure.
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
        status_message = f"Error: {_error_text(e)}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    global product_cache
    if not product_cache:
        product_cache = try_api(c.list_products) or []
    ids = [str(p.get("id", "")) for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def get_cart_completer():
    return WordCompleter(sorted(cart_cache), ignore_case=True)


def remember_cart(cart_id: str):
    if cart_id:
        cart_cache.add(str(cart_id))


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ flatstore",
        "[bold blue]Products & Carts CLI[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def _default(current: Dict[str, Any], key: str, fallback):
    # 0 and 0.0 are real values, only a missing/null field falls back
    value = current.get(key)
    return fallback if value is None else value


def ask_product_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    title = prompt_with_autocomplete("Title", default=current.get("title") or "")
    description = prompt_with_autocomplete("Description", default=current.get("description") or "")
    code = prompt_with_autocomplete("Code", default=current.get("code") or "")
    price = ask_float("💰 Price", default=_default(current, "price", 10.0))
    stock = IntPrompt.ask("📦 Stock", default=_default(current, "stock", 0))
    category = prompt_with_autocomplete("🏷️ Category", default=current.get("category") or "general")
    status = Confirm.ask("Active?", default=current.get("status", True) is not False)
    return {
        "title": title, "description": description, "code": code, "price": price,
        "stock": stock, "category": category, "status": status,
    }


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, product_cache

    console.clear()
    console.print(create_header())

    # Preload products for autocomplete
    product_cache = try_api(c.list_products) or []

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "6", "🆕 Create cart"),
            ("2", "ℹ️ Get product by ID", "7", "🛒 View cart"),
            ("3", "➕ Create product", "8", "➕ Add product to cart"),
            ("4", "✏️ Update product", "", ""),
            ("5", "🗑️ Delete product", "q", "👋 Quit"),
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                product_cache = products
                show_products(products)

        elif choice == "2":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            resp = try_api(c.get_product, pid, success_msg=f"Product {pid} loaded")
            if resp:
                show_products([resp])

        elif choice == "3":
            fields = ask_product_fields()
            resp = try_api(
                c.create_product, fields.pop("title"), fields.pop("price"),
                success_msg="Product created", **fields
            )
            if resp:
                console.print(Panel(f"Created product: [green]{resp['id']}[/green]"))
                product_cache = try_api(c.list_products) or []

        elif choice == "4":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            current = try_api(c.get_product, pid)
            if current:
                fields = ask_product_fields(current)
                resp = try_api(c.update_product, pid, success_msg=f"Product {pid} updated", **fields)
                if resp:
                    show_products([resp])
                    product_cache = try_api(c.list_products) or []

        elif choice == "5":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                resp = try_api(c.delete_product, pid)
                if resp:
                    status_message = resp.get("mensaje", f"Product {pid} deleted")
                    product_cache = try_api(c.list_products) or []

        elif choice == "6":
            resp = try_api(c.create_cart)
            if resp:
                remember_cart(resp["id"])
                status_message = f"Cart {resp['id']} created"
                show_cart(resp["id"], resp.get("products", []))

        elif choice == "7":
            cid = prompt_with_autocomplete("Enter cart ID", completer=get_cart_completer())
            items = try_api(c.get_cart_products, cid, success_msg=f"Cart {cid} loaded")
            if items is not None:
                remember_cart(cid)
                show_cart(cid, items)

        elif choice == "8":
            cid = prompt_with_autocomplete("Enter cart ID", completer=get_cart_completer())
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            resp = try_api(c.add_to_cart, cid, pid, success_msg=f"Added product {pid} to cart {cid}")
            if resp:
                remember_cart(cid)
                show_cart(resp["id"], resp.get("products", []))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
