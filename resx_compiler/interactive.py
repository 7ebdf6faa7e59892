"""Interactive wizard for creating chunks and adding keys.

WHY: Most day-to-day work is "add a key to a screen's chunk, in two or
three languages, then rebuild that chunk". The wizard walks through
exactly that, validates every answer against the store before moving
on, and recompiles only the touched chunk.

HOW: An explicit finite state machine. Each Step has one handler that
asks its question(s), updates WizardState, and returns the next Step:

  SELECT_ACTION → CREATE_NAME → ASK_ADD_KEYS ─┐
                → SELECT_CHUNK ───────────────┤
                → REGENERATE_ALL → DONE       ▼
  COLLECT_KEY → COLLECT_LANGUAGES → COLLECT_VALUES → PERSIST
  PERSIST → ASK_MORE_KEYS → (COLLECT_KEY | ASK_REPEAT)
  ASK_REPEAT → (SELECT_ACTION | DONE)

Prompts are injected callables (defaulting to rich's Prompt/Confirm)
so tests can script the answers.

RULES:
- Invalid answers are re-asked in place; they never leave the step
- The default language must always be among the selected languages
- A ResxError from the store or compiler is shown and the wizard moves
  to ASK_REPEAT; run() then reports failure
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from resx_compiler.config import ResxConfig
from resx_compiler.core.compiler import DistCompiler
from resx_compiler.core.model import CompileReason
from resx_compiler.core.store import SourceChunkStore, validate_chunk_name
from resx_compiler.errors import ResxError, ValidationError

AskFn = Callable[..., str]
ConfirmFn = Callable[..., bool]

# Languages preselected for new keys, when configured
PRESELECTED_LANGUAGES = ("ru",)


class Step(enum.Enum):
    SELECT_ACTION = "select_action"
    REGENERATE_ALL = "regenerate_all"
    CREATE_NAME = "create_name"
    ASK_ADD_KEYS = "ask_add_keys"
    SELECT_CHUNK = "select_chunk"
    COLLECT_KEY = "collect_key"
    COLLECT_LANGUAGES = "collect_languages"
    COLLECT_VALUES = "collect_values"
    PERSIST = "persist"
    ASK_MORE_KEYS = "ask_more_keys"
    ASK_REPEAT = "ask_repeat"
    DONE = "done"


class Action(str, enum.Enum):
    REGENERATE_ALL = "regenerate"
    CREATE = "create"
    ADD = "add"


ACTION_LABELS: Dict[Action, str] = {
    Action.REGENERATE_ALL: "Do everything GOOD",
    Action.CREATE: "Create new resx",
    Action.ADD: "Add keys to existing one",
}


@dataclass
class WizardState:
    """Answers collected so far in the current pass."""

    step: Step = Step.SELECT_ACTION
    chunk_name: Optional[str] = None
    key_name: Optional[str] = None
    languages: List[str] = field(default_factory=list)
    values: Dict[str, str] = field(default_factory=dict)
    failed: bool = False

    def reset_key(self) -> None:
        self.key_name = None
        self.languages = []
        self.values = {}


class InteractiveSession:
    """Drives the wizard against a store and a compiler."""

    def __init__(
        self,
        config: ResxConfig,
        store: SourceChunkStore,
        compiler: DistCompiler,
        console: Optional[Console] = None,
        ask: Optional[AskFn] = None,
        confirm: Optional[ConfirmFn] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.compiler = compiler
        self.console = console or Console(stderr=True)
        self._ask = ask or self._rich_ask
        self._confirm = confirm or self._rich_confirm
        self._handlers = {
            Step.SELECT_ACTION: self._select_action,
            Step.REGENERATE_ALL: self._regenerate_all,
            Step.CREATE_NAME: self._create_name,
            Step.ASK_ADD_KEYS: self._ask_add_keys,
            Step.SELECT_CHUNK: self._select_chunk,
            Step.COLLECT_KEY: self._collect_key,
            Step.COLLECT_LANGUAGES: self._collect_languages,
            Step.COLLECT_VALUES: self._collect_values,
            Step.PERSIST: self._persist,
            Step.ASK_MORE_KEYS: self._ask_more_keys,
            Step.ASK_REPEAT: self._ask_repeat,
        }

    async def run(self) -> bool:
        """Run the wizard until the user is done.

        Returns:
            True if every operation succeeded, False if any failed.
        """
        state = WizardState()
        while state.step is not Step.DONE:
            handler = self._handlers[state.step]
            try:
                state.step = await handler(state)
            except ResxError as e:
                self._error(str(e))
                state.failed = True
                state.step = Step.ASK_REPEAT
        return not state.failed

    # ------------------------------------------------------------------
    # Prompt adapters
    # ------------------------------------------------------------------

    def _rich_ask(self, message: str, choices: Optional[List[str]] = None, default: Optional[str] = None) -> str:
        kwargs: Dict[str, Any] = {"console": self.console}
        if choices is not None:
            kwargs["choices"] = choices
        if default is not None:
            kwargs["default"] = default
        return Prompt.ask(message, **kwargs)

    def _rich_confirm(self, message: str, default: bool = True) -> bool:
        return Confirm.ask(message, default=default, console=self.console)

    def _error(self, message: str) -> None:
        self.console.print("[red]{}[/red]".format(escape(message)))

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    async def _select_action(self, state: WizardState) -> Step:
        for action, label in ACTION_LABELS.items():
            self.console.print("  [cyan]{}[/cyan]  {}".format(action.value, label))
        answer = self._ask(
            "Select operation",
            choices=[a.value for a in Action],
            default=Action.REGENERATE_ALL.value,
        )
        action = Action(answer)
        if action is Action.CREATE:
            return Step.CREATE_NAME
        if action is Action.ADD:
            return Step.SELECT_CHUNK
        return Step.REGENERATE_ALL

    async def _regenerate_all(self, state: WizardState) -> Step:
        await self.store.normalize_all()
        report = await self.compiler.compile_all()
        self.console.print(
            "[green]Done! Compiled {} chunk(s), {} artifact(s).[/green]".format(
                len(report.chunk_names), report.artifact_count
            )
        )
        return Step.DONE

    async def _create_name(self, state: WizardState) -> Step:
        while True:
            name = self._ask("Give it a name").strip()
            try:
                validate_chunk_name(name)
            except ValidationError as e:
                self._error(str(e))
                continue
            if await self.store.chunk_exists(name):
                self._error("Resource file already exists")
                continue
            break

        await self.store.create_empty_chunk(name)
        await self.compiler.compile_chunk(name, CompileReason.CREATED)
        self.console.print("[green]Created {}[/green]".format(name))
        state.chunk_name = name
        return Step.ASK_ADD_KEYS

    async def _ask_add_keys(self, state: WizardState) -> Step:
        if self._confirm("Add keys?", default=True):
            return Step.COLLECT_KEY
        return Step.ASK_REPEAT

    async def _select_chunk(self, state: WizardState) -> Step:
        names = await self.store.list_chunk_names()
        if not names:
            self._error("NO RESOURCES FOUND IN {}".format(self.config.src_folder))
            return Step.ASK_REPEAT
        state.chunk_name = self._ask("Select resource", choices=names)
        return Step.COLLECT_KEY

    async def _collect_key(self, state: WizardState) -> Step:
        state.reset_key()
        existing = await self.store.read_default_language_entries(str(state.chunk_name))
        while True:
            key = self._ask("Key name").strip()
            if key in existing:
                self._error("This key already exists")
                continue
            try:
                self.store.validate_key_name(key)
            except ValidationError as e:
                self._error(str(e))
                continue
            state.key_name = key
            return Step.COLLECT_LANGUAGES

    async def _collect_languages(self, state: WizardState) -> Step:
        default_lang = self.config.default_lang
        preselected = [default_lang] + [
            lang for lang in PRESELECTED_LANGUAGES
            if lang in self.config.languages and lang != default_lang
        ]
        while True:
            answer = self._ask(
                "Select languages ({})".format(", ".join(self.config.languages)),
                default=",".join(preselected),
            )
            selected = parse_language_list(answer)
            unknown = [lang for lang in selected if lang not in self.config.languages]
            if unknown:
                self._error("Unknown language(s): {}".format(", ".join(unknown)))
                continue
            if default_lang not in selected:
                self._error("Default language ({}) must be selected".format(default_lang))
                continue
            state.languages = selected
            return Step.COLLECT_VALUES

    async def _collect_values(self, state: WizardState) -> Step:
        for lang in state.languages:
            while True:
                value = self._ask("'{}' value for '{}'?".format(lang, state.key_name))
                if value:
                    state.values[lang] = value
                    break
                self._error("Can't add empty value")
        return Step.PERSIST

    async def _persist(self, state: WizardState) -> Step:
        chunk_name = str(state.chunk_name)
        await self.store.add_key(chunk_name, str(state.key_name), state.values)
        await self.compiler.compile_chunk(chunk_name, CompileReason.UPDATED)
        self.console.print("[green]Added {} to {}[/green]".format(state.key_name, chunk_name))
        return Step.ASK_MORE_KEYS

    async def _ask_more_keys(self, state: WizardState) -> Step:
        if self._confirm("Add one more key?", default=True):
            return Step.COLLECT_KEY
        return Step.ASK_REPEAT

    async def _ask_repeat(self, state: WizardState) -> Step:
        if self._confirm("Would you like to do something else?", default=False):
            state.chunk_name = None
            state.reset_key()
            return Step.SELECT_ACTION
        return Step.DONE


def parse_language_list(answer: str) -> List[str]:
    """Split a comma/space separated language answer, dropping duplicates."""
    seen: List[str] = []
    for part in answer.replace(",", " ").split():
        if part not in seen:
            seen.append(part)
    return seen
