"""Flask CLI commands for Ledger."""

from __future__ import annotations

import click

from .extensions import get_context


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("ledger-init-db")
    def ledger_init_db() -> None:
        """Create tables and partial unique indexes."""

        from .infra.database import init_database

        ctx = get_context()
        init_database(ctx.engine)
        click.echo(f"Database ready: {ctx.engine.url}")

    @app.cli.command("ledger-create-admin")
    @click.argument("email")
    @click.option(
        "--password",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password for the administrator account",
    )
    @click.option("--name", default="Administrator", show_default=True)
    def ledger_create_admin(email: str, password: str, name: str) -> None:
        """Create or promote an administrator account."""

        from .forms.accounts import MIN_PASSWORD_LENGTH
        from .services.auth import ensure_admin

        if len(password) < MIN_PASSWORD_LENGTH:
            raise click.BadParameter(
                f"must be at least {MIN_PASSWORD_LENGTH} characters", param_hint="--password"
            )
        account = ensure_admin(
            email=email,
            password=password,
            name=name,
            session_factory=get_context().session_factory,
        )
        click.echo(f"Administrator ready: {account.email} (id {account.id})")

    @app.cli.command("ledger-sweep-codes")
    def ledger_sweep_codes() -> None:
        """Deactivate event codes past their expiry."""

        from .services.event_codes import sweep_expired_codes

        count = sweep_expired_codes(session_factory=get_context().session_factory)
        click.echo(f"Expired codes deactivated: {count}")
