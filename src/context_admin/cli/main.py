"""Main CLI entry point for Context Admin.

Manages context profiles on a REST backend, either with one-shot commands or
through the interactive ``page`` command.
"""

from pathlib import Path
import json
import logging
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from context_admin import __version__
from context_admin.client.api import ContextProfileClient
from context_admin.config import Settings, get_settings
from context_admin.engine.page import ContextsPage, ViewState
from context_admin.engine.validation_engine import ValidationEngine, ValidationResult
from context_admin.profiles.base import ContextProfile, ContextDraft
from context_admin.profiles.loader import ProfileLoader, load_profiles
from context_admin.ui.editor import ContextEditor
from context_admin.ui.view import PageView, profiles_table

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="context-admin")
@click.option("--base-url", "-u", help="Backend base URL (default: $CONTEXT_ADMIN_API_BASE_URL)")
@click.option("--timeout", type=float, help="Request timeout in seconds")
@click.option("--token", help="Bearer token for the backend")
@click.option("--maintainer", "-m", help="Maintainer recorded on created profiles")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(
    ctx: click.Context,
    base_url: str | None,
    timeout: float | None,
    token: str | None,
    maintainer: str | None,
    verbose: bool,
) -> None:
    """Context Admin - Manage role context profiles.

    Lists, creates, edits and deletes the context profiles (role, base
    prompt, maintainer) served by a REST backend.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    overrides = {
        "api_base_url": base_url,
        "timeout": timeout,
        "api_token": token,
        "maintainer": maintainer,
    }
    ctx.obj["settings"] = get_settings().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )

    _configure_logging(verbose)


@cli.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the profiles as JSON")
@click.pass_context
def list_contexts(ctx: click.Context, as_json: bool) -> None:
    """List all context profiles."""
    try:
        with _make_client(ctx) as client:
            profiles = client.list_profiles()
    except Exception as e:
        _fail(ctx, e)

    if as_json:
        click.echo(json.dumps([p.to_wire() for p in profiles], indent=2, ensure_ascii=False))
        return

    if not profiles:
        console.print("[yellow]No contexts registered.[/yellow]")
        return

    console.print(profiles_table(profiles))


@cli.command()
@click.argument("profile_id")
@click.pass_context
def show(ctx: click.Context, profile_id: str) -> None:
    """Show a single context profile.

    PROFILE_ID is the backend identifier of the profile.
    """
    try:
        with _make_client(ctx) as client:
            profile = client.get_profile(profile_id)
    except Exception as e:
        _fail(ctx, e)

    console.print(PageView(show_actions=False).profile_panel(profile))
    console.print(f"[dim]id: {escape(profile.id)}[/dim]")


@cli.command()
@click.option("--role", "-r", help="Role label")
@click.option("--base-prompt", "-b", help="Base prompt text")
@click.option("--base-prompt-file", "-f", type=click.Path(exists=True, dir_okay=False), help="Read the base prompt from a file")
@click.pass_context
def create(
    ctx: click.Context,
    role: str | None,
    base_prompt: str | None,
    base_prompt_file: str | None,
) -> None:
    """Create a context profile.

    Prompts for the role and base prompt when they are not given.
    """
    settings: Settings = ctx.obj["settings"]

    base_prompt = _read_base_prompt(base_prompt, base_prompt_file)
    if role is None:
        role = click.prompt("Role")
    if base_prompt is None:
        base_prompt = click.prompt("Base prompt")

    draft = ContextDraft(role=role, base_prompt=base_prompt)
    _check_draft(ctx, draft)

    try:
        with _make_client(ctx) as client:
            created = client.create_profile(draft, maintained_by=settings.maintainer)
    except Exception as e:
        _fail(ctx, e)

    console.print(f"[green]Created context: {escape(draft.role)}[/green]")
    if created is not None:
        console.print(f"[dim]id: {escape(created.id)}[/dim]")


@cli.command()
@click.argument("profile_id")
@click.option("--role", "-r", help="New role label")
@click.option("--base-prompt", "-b", help="New base prompt text")
@click.option("--base-prompt-file", "-f", type=click.Path(exists=True, dir_okay=False), help="Read the new base prompt from a file")
@click.option("--editor", "use_editor", is_flag=True, help="Edit the base prompt in $EDITOR")
@click.pass_context
def edit(
    ctx: click.Context,
    profile_id: str,
    role: str | None,
    base_prompt: str | None,
    base_prompt_file: str | None,
    use_editor: bool,
) -> None:
    """Edit a context profile.

    PROFILE_ID is the backend identifier of the profile. Without --role or
    --base-prompt the profile is edited interactively.
    """
    base_prompt = _read_base_prompt(base_prompt, base_prompt_file)

    try:
        with _make_client(ctx) as client:
            profile = client.get_profile(profile_id)

            if role is None and base_prompt is None:
                editor = ContextEditor(
                    context=profile,
                    is_editing=True,
                    use_editor=use_editor,
                    console=console,
                )
                draft = editor.run(on_save=lambda d: None, on_cancel=lambda: None)
                if draft is None:
                    console.print("[yellow]Cancelled[/yellow]")
                    return
            else:
                draft = ContextDraft(
                    role=profile.role if role is None else role,
                    base_prompt=profile.base_prompt if base_prompt is None else base_prompt,
                )
                _check_draft(ctx, draft)

            client.update_profile(profile.id, draft)
    except Exception as e:
        _fail(ctx, e)

    console.print(f"[green]Updated context: {escape(draft.role)}[/green]")


@cli.command()
@click.argument("profile_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, profile_id: str, yes: bool) -> None:
    """Delete a context profile.

    PROFILE_ID is the backend identifier of the profile.
    """
    try:
        with _make_client(ctx) as client:
            profile = client.get_profile(profile_id)

            if not yes and not click.confirm(f'Delete context "{profile.role}"?', default=False):
                console.print("[yellow]Cancelled[/yellow]")
                return

            client.delete_profile(profile.id)
    except click.Abort:
        raise
    except Exception as e:
        _fail(ctx, e)

    console.print(f"[green]Deleted context: {escape(profile.role)}[/green]")


@cli.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output YAML file (stdout if not specified)")
@click.pass_context
def export_contexts(ctx: click.Context, output: str | None) -> None:
    """Export all context profiles to YAML."""
    loader = ProfileLoader()

    try:
        with _make_client(ctx) as client:
            profiles = client.list_profiles()

        if output:
            loader.save_file(profiles, output)
        else:
            click.echo(loader.dump_string(profiles), nl=False)
    except Exception as e:
        _fail(ctx, e)

    if output:
        console.print(f"[green]Exported {len(profiles)} contexts to {escape(output)}[/green]")


@cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--update-existing", is_flag=True, help="Update profiles whose id already exists instead of creating new ones")
@click.option("--dry-run", is_flag=True, help="Validate and show what would be imported without changing anything")
@click.pass_context
def import_contexts(ctx: click.Context, path: str, update_existing: bool, dry_run: bool) -> None:
    """Import context profiles from a YAML file.

    PATH is a YAML file with a 'profiles' list, as written by 'export'.
    Identifiers in the file are only used with --update-existing; new
    profiles get their identifiers from the backend.
    """
    settings: Settings = ctx.obj["settings"]

    try:
        profiles = load_profiles(path)
    except Exception as e:
        _fail(ctx, e)

    result = ValidationEngine().validate_profiles(profiles, check_ids=update_existing)
    _print_validation_result(Path(path).name, result)
    if not result.valid:
        sys.exit(1)

    created = updated = 0
    try:
        with _make_client(ctx) as client:
            existing_ids = set()
            if update_existing:
                existing_ids = {p.id for p in client.list_profiles()}

            for profile in profiles:
                draft = profile.to_draft()
                if profile.id is not None and profile.id in existing_ids:
                    if not dry_run:
                        client.update_profile(profile.id, draft)
                    updated += 1
                else:
                    if not dry_run:
                        client.create_profile(
                            draft,
                            maintained_by=profile.maintained_by or settings.maintainer,
                        )
                    created += 1
    except Exception as e:
        _fail(ctx, e)

    title = "Dry Run" if dry_run else "Import Complete"
    console.print(Panel.fit(
        f"[cyan]Created:[/cyan] {created}\n"
        f"[cyan]Updated:[/cyan] {updated}",
        title=title,
    ))


@cli.command()
@click.option("--editor", "use_editor", is_flag=True, help="Edit base prompts in $EDITOR")
@click.pass_context
def page(ctx: click.Context, use_editor: bool) -> None:
    """Open the interactive contexts page.

    \b
    Actions:
      a        add a new context
      e N      edit context number N
      d N      delete context number N
      r        reload the list
      q        quit
    """
    settings: Settings = ctx.obj["settings"]
    view = PageView()

    with _make_client(ctx) as client:
        contexts_page = ContextsPage(
            client,
            maintainer=settings.maintainer,
            confirm=lambda message: click.confirm(message, default=False),
        )
        contexts_page.mount()

        while True:
            view.print(contexts_page, console)

            # A failed save leaves the editor open; resume it once the page is usable
            if contexts_page.view_state == ViewState.READY and contexts_page.editor_open:
                _run_editor(contexts_page, use_editor)
                continue

            try:
                action = click.prompt("Action", prompt_suffix=" > ")
            except click.Abort:
                break

            command, _, argument = action.strip().partition(" ")
            command = command.lower()

            if command in ("q", "quit"):
                break

            if command in ("r", "reload"):
                contexts_page.reload()
                continue

            if contexts_page.view_state != ViewState.READY:
                console.print("[yellow]Press r to retry or q to quit[/yellow]")
                continue

            if command in ("a", "add"):
                if contexts_page.start_create():
                    _run_editor(contexts_page, use_editor)
            elif command in ("e", "edit", "d", "delete"):
                context = _pick_context(contexts_page, argument)
                if context is None:
                    console.print(f"[yellow]No context numbered '{escape(argument)}'[/yellow]")
                elif command in ("e", "edit"):
                    contexts_page.handle_edit(context)
                    _run_editor(contexts_page, use_editor)
                else:
                    contexts_page.handle_delete(context)
            else:
                console.print(f"[yellow]Unknown action: {escape(command)}[/yellow]")


def _make_client(ctx: click.Context) -> ContextProfileClient:
    """Build a client from the resolved settings.

    A ``session`` placed in ``ctx.obj`` is reused, which lets callers supply
    their own transport.
    """
    settings: Settings = ctx.obj["settings"]
    return ContextProfileClient(
        base_url=settings.api_base_url,
        timeout=settings.timeout,
        session=ctx.obj.get("session"),
        token=settings.api_token,
        verify_ssl=settings.verify_ssl,
    )


def _configure_logging(verbose: bool) -> None:
    # The level is applied on every call; basicConfig alone is a no-op once
    # the root logger has handlers
    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(ctx: click.Context, error: Exception) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    if ctx.obj.get("verbose"):
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


def _read_base_prompt(base_prompt: str | None, base_prompt_file: str | None) -> str | None:
    if base_prompt_file:
        return Path(base_prompt_file).read_text(encoding="utf-8").rstrip("\n")
    return base_prompt


def _check_draft(ctx: click.Context, draft: ContextDraft) -> None:
    """Print validation issues and exit if the draft cannot be saved."""
    result = ValidationEngine().validate_draft(draft)
    if result.issues:
        _print_validation_result(draft.role or "context", result)
    if not result.valid:
        sys.exit(1)


def _run_editor(contexts_page: ContextsPage, use_editor: bool) -> None:
    editor = ContextEditor(
        context=contexts_page.editing_context,
        initial=contexts_page.form_data,
        is_editing=contexts_page.editing_id is not None,
        use_editor=use_editor,
        console=console,
    )
    editor.run(on_save=contexts_page.handle_save, on_cancel=contexts_page.handle_cancel)


def _pick_context(contexts_page: ContextsPage, argument: str) -> ContextProfile | None:
    """Resolve a 1-based list number to a context."""
    try:
        index = int(argument)
    except ValueError:
        return None
    if 1 <= index <= len(contexts_page.contexts):
        return contexts_page.contexts[index - 1]
    return None


def _print_validation_result(name: str, result: ValidationResult) -> None:
    """Print validation results."""
    status = "[green]VALID[/green]" if result.valid else "[red]INVALID[/red]"
    console.print(f"\n{escape(name)}: {status}")

    if result.issues:
        for issue in result.issues:
            color = {
                "error": "red",
                "warning": "yellow",
                "info": "blue",
            }.get(issue.severity.value, "white")

            console.print(f"  [{color}]{issue.severity.value.upper()}[/{color}]: {escape(issue.message)}")
            if issue.path:
                console.print(f"    Path: {issue.path}")


if __name__ == "__main__":
    cli()
