"""Interactive editor for a single context profile."""

from typing import Callable

import click
from rich.console import Console

from context_admin.engine.validation_engine import ValidationEngine, ValidationSeverity
from context_admin.profiles.base import ContextProfile, ContextDraft

CANCEL_ANSWER = "-"


class ContextEditor:
    """Prompts for a role and base prompt, then saves or cancels.

    Args:
        context: The profile being edited; None when creating
        initial: Form contents to start from; defaults to the profile's fields
        is_editing: Whether an existing profile is being edited
        use_editor: Open $EDITOR for the base prompt instead of a one-line prompt
        console: Where validation feedback is printed
    """

    def __init__(
        self,
        context: ContextProfile | None = None,
        initial: ContextDraft | None = None,
        is_editing: bool = False,
        use_editor: bool = False,
        console: Console | None = None,
        validation_engine: ValidationEngine | None = None,
    ):
        self.context = context
        self.initial = initial
        self.is_editing = is_editing
        self.use_editor = use_editor
        self.console = console or Console()
        self.validation_engine = validation_engine or ValidationEngine()

    @property
    def title(self) -> str:
        return "Edit context" if self.is_editing else "New context"

    def initial_draft(self) -> ContextDraft:
        if self.initial is not None and not self.initial.is_blank():
            return self.initial
        if self.context is not None:
            return ContextDraft.from_profile(self.context)
        return ContextDraft()

    def run(
        self,
        on_save: Callable[[ContextDraft], object],
        on_cancel: Callable[[], object],
    ) -> ContextDraft | None:
        """Collect a valid draft and hand it to ``on_save``.

        Re-prompts while the draft has errors. Answering ``-`` for the role,
        or aborting the prompt, calls ``on_cancel`` instead.

        Returns:
            The saved draft, or None if cancelled
        """
        self.console.print(f"[bold]{self.title}[/bold] [dim](enter '{CANCEL_ANSWER}' as role to cancel)[/dim]")

        draft = self.initial_draft()
        try:
            while True:
                draft = self._prompt(draft)
                if draft is None:
                    on_cancel()
                    return None

                result = self.validation_engine.validate_draft(draft)
                for issue in result.issues:
                    color = "red" if issue.severity == ValidationSeverity.ERROR else "yellow"
                    self.console.print(f"  [{color}]{issue.severity.value.upper()}[/{color}]: {issue.message}")

                if result.valid:
                    break
        except click.Abort:
            on_cancel()
            return None

        on_save(draft)
        return draft

    def _prompt(self, current: ContextDraft) -> ContextDraft | None:
        role = click.prompt("Role", default=current.role or None, show_default=bool(current.role))
        if role.strip() == CANCEL_ANSWER:
            return None

        if self.use_editor:
            edited = click.edit(current.base_prompt)
            # None means the editor was closed without saving
            base_prompt = current.base_prompt if edited is None else edited.rstrip("\n")
        else:
            base_prompt = click.prompt(
                "Base prompt",
                default=current.base_prompt or "",
                show_default=False,
            )

        return ContextDraft(role=role, base_prompt=base_prompt)
