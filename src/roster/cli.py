"""CLI entry point for the roster client."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING

import click

from roster import __version__
from roster.config import ConfigError, RosterConfig, resolve_config
from roster.controller import RosterController
from roster.logging import setup_logging
from roster.session import AuthError, TokenAuthProvider

if TYPE_CHECKING:
    from roster.gateway import StudentRecord


class TerminalNavigator:
    """Navigator that records the redirect and tells the user to log in."""

    def __init__(self) -> None:
        self.destination: str | None = None

    def navigate(self, destination: str) -> None:
        if self.destination is None:
            click.echo("Not logged in or session expired. Run `roster login`.", err=True)
        self.destination = destination


class TerminalPrompter:
    """Prompter backed by click; ``assume_yes`` answers every confirmation."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    async def alert(self, message: str) -> None:
        click.echo(click.style(message, fg="yellow"), err=True)

    async def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        return await asyncio.to_thread(click.confirm, message, default=False)


Action = Callable[[RosterController], Awaitable[bool]]


def _run(
    config: RosterConfig,
    action: Action | None = None,
    assume_yes: bool = False,
    search: str = "",
) -> None:
    """Load the roster, run ``action`` against it, print the result.

    Exits non-zero when the session is missing, the action reports failure
    or an error banner is shown.
    """
    navigator = TerminalNavigator()
    controller = RosterController.from_config(
        config,
        TokenAuthProvider.from_config(config),
        navigator,
        TerminalPrompter(assume_yes),
    )
    controller.set_search(search)

    async def drive() -> bool:
        try:
            if await controller.on_render() and action is not None:
                return await action(controller)
            return True
        finally:
            await controller.aclose()

    ok = asyncio.run(drive())

    if navigator.destination is not None:
        sys.exit(1)
    _render(controller)
    if controller.store.error or not ok:
        sys.exit(1)


def _render(controller: RosterController) -> None:
    if controller.store.error:
        click.echo(click.style(controller.store.error, fg="red"), err=True)

    user = controller.session.user
    if user is not None:
        click.echo(f"Welcome, {user.display_name}!")

    students = controller.visible_students
    if not students:
        click.echo("No students found")
    else:
        click.echo(f"{'ID':>5}  {'Name':<24}  {'Email':<32}  {'Age':>3}")
        for student in students:
            click.echo(
                f"{student.id:>5}  {student.name:<24}  {student.email:<32}  {student.age:>3}"
            )
    click.echo(f"Total Students: {controller.total_visible}")


def _find(controller: RosterController, student_id: int) -> StudentRecord:
    for student in controller.students:
        if student.id == student_id:
            return student
    raise click.ClickException(f"Student {student_id} not found")


def _fill(controller: RosterController, **values: str | None) -> None:
    for name, value in values.items():
        if value is not None:
            controller.editor.set_field(name, value)


async def _submit(controller: RosterController) -> bool:
    if await controller.submit():
        return True
    controller.cancel()
    return False


@click.group()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to roster.yaml (auto-detected if not specified)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to the console")
@click.version_option(__version__)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Manage a student roster through its REST API."""
    try:
        config = resolve_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(
        log_dir=config.logging.dir,
        level="DEBUG" if verbose else config.logging.level,
        console=verbose,
    )
    ctx.obj = config


@main.command()
@click.option("-u", "--username", prompt=True)
@click.option("-p", "--password", prompt=True, hide_input=True)
@click.pass_obj
def login(config: RosterConfig, username: str, password: str) -> None:
    """Log in and remember the session."""
    provider = TokenAuthProvider.from_config(config)

    async def run() -> None:
        try:
            user = await provider.login(username, password)
        finally:
            await provider.aclose()
        click.echo(f"Welcome, {user.display_name}!")

    try:
        asyncio.run(run())
    except AuthError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option("-u", "--username", prompt=True)
@click.option("-e", "--email", prompt=True)
@click.option("-n", "--full-name", prompt=True, default="")
@click.option("-p", "--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def register(
    config: RosterConfig, username: str, email: str, full_name: str, password: str
) -> None:
    """Create an account and log in with it."""
    provider = TokenAuthProvider.from_config(config)

    async def run() -> None:
        try:
            user = await provider.register(username, email, password, full_name)
        finally:
            await provider.aclose()
        click.echo(f"Welcome, {user.display_name}!")

    try:
        asyncio.run(run())
    except AuthError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.pass_obj
def logout(config: RosterConfig) -> None:
    """Forget the saved session."""
    TokenAuthProvider.from_config(config).logout()
    click.echo("Logged out")


@main.command(name="list")
@click.option("-s", "--search", default="", help="Filter by name or email")
@click.pass_obj
def list_command(config: RosterConfig, search: str) -> None:
    """Show students."""
    _run(config, search=search)


@main.command()
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--age", prompt=True)
@click.pass_obj
def add(config: RosterConfig, name: str, email: str, age: str) -> None:
    """Add a student."""

    async def action(controller: RosterController) -> bool:
        controller.open_add()
        _fill(controller, name=name, email=email, age=age)
        return await _submit(controller)

    _run(config, action)


@main.command()
@click.argument("student_id", type=int)
@click.option("--name")
@click.option("--email")
@click.option("--age")
@click.pass_obj
def edit(
    config: RosterConfig, student_id: int, name: str | None, email: str | None, age: str | None
) -> None:
    """Change a student's fields; omitted fields keep their values."""

    async def action(controller: RosterController) -> bool:
        controller.open_edit(_find(controller, student_id))
        _fill(controller, name=name, email=email, age=age)
        return await _submit(controller)

    _run(config, action)


@main.command()
@click.argument("student_id", type=int)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def delete(config: RosterConfig, student_id: int, yes: bool) -> None:
    """Delete a student."""

    async def action(controller: RosterController) -> bool:
        _find(controller, student_id)
        if not await controller.delete(student_id):
            click.echo("Student not deleted")
        return True

    _run(config, action, assume_yes=yes)
