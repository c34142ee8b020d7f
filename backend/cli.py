"""
Jet Manager CLI.

Command-line interface for common operations: database setup, dev tokens,
ledger summaries and health checks.
"""

import sys
import time
from datetime import date
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="jet-manager",
    help="Jet Manager restaurant operations CLI",
    add_completion=False,
)
console = Console()


def _cents(amount: int) -> str:
    return f"{amount / 100:,.2f}"


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all tables that do not exist yet."""
    from sqlalchemy.exc import SQLAlchemyError
    from shared.infrastructure.db import engine
    from rest_api.models import Base

    try:
        Base.metadata.create_all(bind=engine)
        console.print("[green]✓ Tables created/verified[/green]")
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Seed outside development"),
):
    """Seed the demo restaurant."""
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context
    from rest_api.seed import seed

    if settings.environment != "development" and not force:
        console.print(f"[red]Refusing to seed '{settings.environment}' without --force[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        restaurant = seed(db)
        console.print(f"[green]✓ Demo restaurant ready: {restaurant.id}[/green]")


# =============================================================================
# Auth Commands
# =============================================================================

@app.command()
def token(
    user_id: str = typer.Argument(..., help="Value for the sub claim"),
    restaurant_id: str = typer.Option(None, "--restaurant", "-r", help="Home restaurant"),
    user_type: str = typer.Option("staff", "--type", "-t", help="superadmin|admin|manager|staff"),
    ttl: int = typer.Option(3600, help="Lifetime in seconds"),
):
    """Issue a signed access token for local testing."""
    from shared.config.constants import UserType
    from shared.config.settings import settings
    from shared.security.auth import sign_jwt

    if settings.environment == "production":
        console.print("[red]Tokens cannot be issued from the CLI in production[/red]")
        raise typer.Exit(1)
    if user_type not in UserType.ALL:
        console.print(f"[red]Unknown user type '{user_type}'[/red]")
        raise typer.Exit(1)
    if user_type != UserType.SUPERADMIN and not restaurant_id:
        console.print("[red]--restaurant is required for this user type[/red]")
        raise typer.Exit(1)

    payload = {"sub": user_id, "user_type": user_type}
    if restaurant_id:
        payload["restaurant_id"] = restaurant_id
    typer.echo(sign_jwt(payload, ttl_seconds=ttl))


# =============================================================================
# Report Commands
# =============================================================================

@app.command()
def orders(
    restaurant_id: str = typer.Argument(..., help="Restaurant id"),
    status: str = typer.Option(None, help="Only orders in this status"),
    limit: int = typer.Option(20, help="Maximum rows"),
):
    """List the most recent orders of a restaurant."""
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException
    from rest_api.services.domain import OrderService

    with get_db_context() as db:
        try:
            rows = OrderService(db).list_orders(restaurant_id, status=status, limit=limit)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

        table = Table(title=f"Orders of {restaurant_id}")
        table.add_column("Code", style="cyan")
        table.add_column("Type")
        table.add_column("Status", style="green")
        table.add_column("Total", justify="right", style="yellow")
        table.add_column("Created")

        for order in rows:
            table.add_row(
                order.code,
                order.type,
                order.status,
                _cents(order.total_amount_cents),
                order.created_at.strftime("%Y-%m-%d %H:%M"),
            )

    console.print(table)


@app.command()
def summary(
    restaurant_id: str = typer.Argument(..., help="Restaurant id"),
    day: str = typer.Option(None, help="Day (YYYY-MM-DD); today by default"),
    month: str = typer.Option(None, help="Month (YYYY-MM); overrides --day"),
):
    """Show income, expense and balance for a day or a month."""
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException
    from shared.utils.periods import local_today
    from rest_api.services.domain import FinanceService

    with get_db_context() as db:
        service = FinanceService(db)
        try:
            if month:
                year_part, month_part = month.split("-", 1)
                result = service.get_monthly_summary(restaurant_id, int(year_part), int(month_part))
            else:
                result = service.get_daily_summary(
                    restaurant_id, date.fromisoformat(day) if day else local_today()
                )
        except ValueError:
            console.print("[red]✗ Use YYYY-MM-DD for --day and YYYY-MM for --month[/red]")
            raise typer.Exit(1)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    table = Table(title=f"{result.period_start} .. {result.period_end}")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expense", justify="right", style="red")
    table.add_column("Balance", justify="right", style="yellow")
    table.add_row(
        _cents(result.income_cents),
        _cents(result.expense_cents),
        _cents(result.balance_cents),
    )
    console.print(table)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(None, help="REST API base URL"),
):
    """Check system health."""
    import httpx
    from shared.config.settings import settings
    from shared.infrastructure.events import check_redis_sync_health

    base_url = url or f"http://localhost:{settings.rest_api_port}"

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    start = time.time()
    try:
        response = httpx.get(f"{base_url}/api/health", timeout=5.0)
        elapsed = (time.time() - start) * 1000
        if response.status_code == 200:
            table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")

    start = time.time()
    if check_redis_sync_health():
        table.add_row("Redis", "✓ Healthy", f"{(time.time() - start) * 1000:.0f}ms")
    else:
        table.add_row("Redis", "✗ Unreachable", "-")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Jet Manager Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
