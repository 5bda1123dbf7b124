"""
Command execution for Blockslides.

A command is a factory returning a closure over ``CommandProps``:

    def set_meta(key, value):
        def command(props: CommandProps) -> bool:
            props.tr.set_meta(key, value)
            return True
        return command

The closure returns True when the command applies. When
``props.dispatch`` is None the caller is only probing; the command may
still touch ``props.tr`` (it is a throwaway transaction) but should
avoid side effects outside it.

Three execution modes:

1. Direct (``manager.commands.name(...)``): fresh transaction, run,
   dispatch to the editor.
2. Chain (``manager.chain().a().b().run()``): calls are queued and run
   in order against one shared transaction on ``run()``; the
   transaction is dispatched once at the end.
3. Probe (``manager.can().name(...)`` or ``chain()....can()``): the
   same execution with ``dispatch=None``; nothing is dispatched.

Exceptions raised by a command are not caught. The in-progress
transaction is dropped and nothing is dispatched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

from blockslides.errors import ChainError, EditorDestroyedError
from blockslides.state import ChainableState, Transaction

if TYPE_CHECKING:
    from blockslides.editor import Editor

logger = logging.getLogger(__name__)


Command = Callable[["CommandProps"], bool]
CommandFactory = Callable[..., Command]

# Transaction meta keys
PREVENT_DISPATCH = "prevent_dispatch"
PREVENT_UPDATE = "prevent_update"
FOCUS = "focus"


def _run_mode_dispatch(tr: Transaction) -> None:
    """Marker handed to commands in run mode. The manager does the real dispatch."""
    return None


@dataclass
class CommandProps:
    """
    Everything a command closure receives.

    Attributes:
        editor: Owning editor, passed explicitly
        state: State view following ``tr``
        tr: Shared in-progress transaction
        dispatch: Callable in run mode, None when probing
        commands: Other commands, bound to the same transaction
        chain: Start a nested chain on the same transaction
        can: Probe commands on the same transaction
        view: Host view, if the editor has one
    """

    editor: Any
    state: ChainableState
    tr: Transaction
    dispatch: Callable[[Transaction], None] | None
    commands: BoundCommands
    chain: Callable[[], CommandChain]
    can: Callable[[], CanCommands]
    view: Any = None


class CommandManager:
    """
    Builds the command surfaces of one editor.

    Args:
        editor: Object exposing ``state``, ``dispatch(tr)``, ``view`` and
            ``is_destroyed``
        raw_commands: Command factories keyed by name
    """

    def __init__(self, editor: Editor | Any, raw_commands: Mapping[str, CommandFactory]):
        self._editor = editor
        self._raw_commands = dict(raw_commands)

    @property
    def editor(self) -> Any:
        return self._editor

    @property
    def raw_commands(self) -> dict[str, CommandFactory]:
        return dict(self._raw_commands)

    def get(self, name: str) -> CommandFactory:
        """
        Look up a command factory.

        Raises:
            AttributeError: If no extension registered the name
        """
        try:
            return self._raw_commands[name]
        except KeyError:
            raise AttributeError(f"Unknown command: '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._raw_commands

    def __iter__(self) -> Iterator[str]:
        return iter(self._raw_commands)

    def __len__(self) -> int:
        return len(self._raw_commands)

    def __repr__(self) -> str:
        return f"<CommandManager commands={len(self._raw_commands)}>"

    # -------------------------------------------------------------------------
    # Surfaces
    # -------------------------------------------------------------------------

    @property
    def commands(self) -> SingleCommands:
        return SingleCommands(self)

    def chain(self) -> CommandChain:
        return CommandChain(self)

    def can(self) -> CanCommands:
        return CanCommands(self)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def check_alive(self) -> None:
        if getattr(self._editor, "is_destroyed", False):
            raise EditorDestroyedError("Cannot run commands on a destroyed editor")

    def create_transaction(self) -> Transaction:
        return self._editor.state.tr

    def create_props(self, tr: Transaction, *, should_dispatch: bool) -> CommandProps:
        return CommandProps(
            editor=self._editor,
            state=ChainableState(self._editor.state, tr),
            tr=tr,
            dispatch=_run_mode_dispatch if should_dispatch else None,
            commands=BoundCommands(self, tr, should_dispatch=should_dispatch),
            chain=lambda: CommandChain(self, tr=tr, should_dispatch=should_dispatch),
            can=lambda: CanCommands(self, tr=tr),
            view=getattr(self._editor, "view", None),
        )

    def invoke(
        self,
        name: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
        tr: Transaction,
        *,
        should_dispatch: bool,
    ) -> bool:
        """Run one command against ``tr``. Does not dispatch."""
        factory = self.get(name)
        props = self.create_props(tr, should_dispatch=should_dispatch)
        logger.debug(f"[commands] {'Running' if should_dispatch else 'Probing'} '{name}'")
        return bool(factory(*args, **kwargs)(props))

    def dispatch(self, tr: Transaction) -> None:
        if tr.get_meta(PREVENT_DISPATCH):
            logger.debug("[commands] Dispatch prevented by transaction meta")
            return
        self._editor.dispatch(tr)


# =============================================================================
# Command namespaces
# =============================================================================


class _CommandNamespace:
    """Attribute access resolves to registered commands."""

    def __init__(self, manager: CommandManager):
        self._manager = manager

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        self._manager.get(name)
        return self._bind(name)

    def __contains__(self, name: object) -> bool:
        return name in self._manager

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._manager))

    def _bind(self, name: str) -> Callable[..., Any]:
        raise NotImplementedError


class SingleCommands(_CommandNamespace):
    """``editor.commands.name(...)``: run and dispatch immediately."""

    def _bind(self, name: str) -> Callable[..., bool]:
        def method(*args: Any, **kwargs: Any) -> bool:
            self._manager.check_alive()
            tr = self._manager.create_transaction()
            result = self._manager.invoke(name, args, kwargs, tr, should_dispatch=True)
            self._manager.dispatch(tr)
            return result

        method.__name__ = name
        return method


class BoundCommands(_CommandNamespace):
    """Commands bound to an existing transaction (``props.commands``)."""

    def __init__(self, manager: CommandManager, tr: Transaction, *, should_dispatch: bool):
        super().__init__(manager)
        self._tr = tr
        self._should_dispatch = should_dispatch

    def _bind(self, name: str) -> Callable[..., bool]:
        def method(*args: Any, **kwargs: Any) -> bool:
            return self._manager.invoke(
                name, args, kwargs, self._tr, should_dispatch=self._should_dispatch
            )

        method.__name__ = name
        return method


class CanCommands(_CommandNamespace):
    """``editor.can().name(...)``: probe without dispatching."""

    def __init__(self, manager: CommandManager, tr: Transaction | None = None):
        super().__init__(manager)
        self._tr = tr

    def _bind(self, name: str) -> Callable[..., bool]:
        def method(*args: Any, **kwargs: Any) -> bool:
            self._manager.check_alive()
            tr = self._tr if self._tr is not None else self._manager.create_transaction()
            return self._manager.invoke(name, args, kwargs, tr, should_dispatch=False)

        method.__name__ = name
        return method

    def chain(self) -> CommandChain:
        return CommandChain(self._manager, tr=self._tr, should_dispatch=False)


# =============================================================================
# Chain
# =============================================================================


@dataclass(frozen=True)
class _Invocation:
    name: str
    args: tuple[Any, ...]
    kwargs: Mapping[str, Any]


class CommandChain:
    """
    Queue of command invocations run against one transaction.

    A chain is consumed by ``run()`` or ``can()``; using it afterwards
    raises ``ChainError``. A chain started on an existing transaction
    (from inside a command) never dispatches: the outer caller does.

    Usage:
        ok = editor.chain().focus().toggle_mark("bold").run()
    """

    def __init__(
        self,
        manager: CommandManager,
        *,
        tr: Transaction | None = None,
        should_dispatch: bool = True,
    ):
        self._manager = manager
        self._tr = tr
        self._should_dispatch = should_dispatch
        self._queue: list[_Invocation] = []
        self._consumed = False

    def __getattr__(self, name: str) -> Callable[..., CommandChain]:
        if name.startswith("_"):
            raise AttributeError(name)
        self._manager.get(name)

        def method(*args: Any, **kwargs: Any) -> CommandChain:
            self._check_open()
            self._queue.append(_Invocation(name, args, kwargs))
            return self

        method.__name__ = name
        return method

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        names = [invocation.name for invocation in self._queue]
        return f"<CommandChain queue={names} consumed={self._consumed}>"

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _check_open(self) -> None:
        if self._consumed:
            raise ChainError("Command chain has already been run")

    def _execute(self, *, should_dispatch: bool) -> tuple[bool, Transaction]:
        self._check_open()
        self._consumed = True
        self._manager.check_alive()

        tr = self._tr if self._tr is not None else self._manager.create_transaction()
        results = [
            self._manager.invoke(
                invocation.name,
                invocation.args,
                invocation.kwargs,
                tr,
                should_dispatch=should_dispatch,
            )
            for invocation in self._queue
        ]
        return all(results), tr

    def run(self) -> bool:
        """
        Run the queued commands in order and dispatch once.

        Returns:
            True if every command returned True
        """
        should_dispatch = self._should_dispatch
        result, tr = self._execute(should_dispatch=should_dispatch)

        if should_dispatch and self._tr is None:
            self._manager.dispatch(tr)

        logger.debug(f"[commands] Chain of {len(self._queue)} ran | result={result}")
        return result

    def can(self) -> bool:
        """Probe the queued commands without dispatching anything."""
        result, _ = self._execute(should_dispatch=False)
        return result
