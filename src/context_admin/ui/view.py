"""Rich rendering of the contexts page."""

from rich.console import Console, Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from context_admin import __version__
from context_admin.engine.page import ContextsPage, ViewState
from context_admin.profiles.base import ContextProfile
from context_admin.utils.helpers import first_line, truncate

PAGE_TITLE = "Context Settings by Role"
EMPTY_MESSAGE = "No contexts registered."
LOADING_MESSAGE = "Loading..."


class PageView:
    """Turns a ContextsPage into rich renderables.

    The layout follows the page: a header, then the loading line, the error
    line, or the title, the editor (when open) and the profile list.
    """

    def __init__(self, show_actions: bool = True):
        self.show_actions = show_actions

    def render(self, page: ContextsPage) -> Group:
        parts: list[RenderableType] = [self.header()]

        state = page.view_state
        if state == ViewState.LOADING:
            parts.append(Text(LOADING_MESSAGE, justify="center"))
        elif state == ViewState.ERROR:
            parts.append(Text(f"Error: {page.error}", style="red", justify="center"))
        else:
            parts.extend(self._body(page))

        return Group(*parts)

    def print(self, page: ContextsPage, console: Console) -> None:
        console.print(self.render(page))

    def header(self) -> RenderableType:
        return Rule(f"[bold]Context Admin[/bold] [dim]v{__version__}[/dim]")

    def _body(self, page: ContextsPage) -> list[RenderableType]:
        parts: list[RenderableType] = [Text(PAGE_TITLE, style="bold")]

        if self.show_actions and page.show_add_button:
            parts.append(Text("[a] Add new context", style="blue"))

        if page.editor_open:
            parts.append(self.editor_banner(page))

        if page.is_empty:
            parts.append(Text(EMPTY_MESSAGE, style="dim", justify="center"))
        else:
            for number, context in enumerate(page.contexts, start=1):
                parts.append(self.profile_panel(context, number))

        return parts

    def editor_banner(self, page: ContextsPage) -> RenderableType:
        if page.editing_id is not None:
            context = page.editing_context
            label = context.role if context else page.editing_id
            return Text(f"Editing context: {label}", style="yellow")
        return Text("Creating a new context", style="yellow")

    def profile_panel(self, context: ContextProfile, number: int | None = None) -> Panel:
        heading = Text()
        if number is not None:
            heading.append(f"{number}. ", style="dim")
        heading.append(context.role, style="bold")

        body = Group(
            Text(f"Maintainer: {context.maintained_by}", style="dim"),
            Text(""),
            Text("Base prompt:", style="bold"),
            # Text keeps line breaks, like pre-wrap
            Text(context.base_prompt),
        )

        subtitle = None
        if self.show_actions and number is not None:
            subtitle = Text(f"[e {number}] Edit  [d {number}] Delete", style="dim")

        return Panel(body, title=heading, title_align="left", subtitle=subtitle, subtitle_align="right")


def profiles_table(profiles: list[ContextProfile], title: str = "Context Profiles") -> Table:
    """Summary table of profiles, one row each."""
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Role", style="green")
    table.add_column("Maintainer")
    table.add_column("Base prompt")

    for profile in profiles:
        table.add_row(
            escape(profile.id),
            escape(profile.role),
            escape(profile.maintained_by) or "-",
            escape(truncate(first_line(profile.base_prompt))) or "-",
        )

    return table
