"""
Command interpreter: validate and apply definition commands.

One logical command is processed at a time. The interpreter never raises
on malformed input; every problem becomes an error or warning Message that
is written to the output, mirrored to the session log, and returned to the
caller. Valid parts of a command are applied even when other parts of the
same command are rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from pydfa.config import InterpreterConfig
from pydfa.core.automaton import Automaton
from pydfa.core.execution import run
from pydfa.core.types import (
    Transition,
    is_state_name,
    is_symbol,
    strip_punctuation,
)
from pydfa.interpreter.diagnostics import Message, error, info, warning
from pydfa.interpreter.source import SEPARATOR, CommandAssembler
from pydfa.io.logsink import LogSink
from pydfa.io.snapshot import SnapshotError, load_snapshot, save_snapshot
from pydfa.io.text_dump import render_configuration, write_configuration

logger = logging.getLogger(__name__)

TERMINATED = "TERMINATED BY USER"


@dataclass(frozen=True)
class _Command:
    keyword: str
    args: tuple[str, ...]
    body: str
    line: Optional[int]


class Interpreter:
    """
    Owns one Automaton and applies commands to it.

    Args:
        automaton: Model to mutate. A fresh empty one is created if omitted.
        config: Interpreter settings.
        output: Receives every rendered output line (default: print).
        log_sink: Session log; a closed one is created if omitted.
    """

    def __init__(
        self,
        automaton: Optional[Automaton] = None,
        config: Optional[InterpreterConfig] = None,
        output: Optional[Callable[[str], None]] = None,
        log_sink: Optional[LogSink] = None,
    ) -> None:
        self.automaton = automaton if automaton is not None else Automaton()
        self.config = config if config is not None else InterpreterConfig()
        self.output = output if output is not None else print
        self.log_sink = log_sink if log_sink is not None else LogSink(self.config.encoding)
        self.finished = False

        self._collectors: list[list[Message]] = []
        self._loading: list[Path] = []
        self._handlers: dict[str, Callable[[_Command], None]] = {
            "SYMBOLS": self._symbols,
            "STATES": self._states,
            "INITIAL-STATE": self._initial_state,
            "FINAL-STATES": self._final_states,
            "TRANSITIONS": self._transitions,
            "PRINT": self._print,
            "EXECUTE": self._execute,
            "COMPILE": self._compile,
            "LOAD": self._load,
            "CLEAR": self._clear,
            "LOG": self._log,
            "EXIT": self._exit,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, command: str, line: Optional[int] = None) -> list[Message]:
        """
        Process one logical command.

        Args:
            command: Command text, with or without the trailing separator.
            line: Source line number used in diagnostics.

        Returns:
            Every message emitted while processing, including those of
            commands replayed by LOAD.
        """
        if self.finished:
            return []

        text = command.strip()
        if text.endswith(SEPARATOR):
            text = text[: -len(SEPARATOR)].rstrip()
        if not text:
            return []

        self.log_sink.write(self.config.prompt + text)

        first, *args = text.split()
        parsed = _Command(
            keyword=first.upper(),
            args=tuple(args),
            body=text[len(first):].strip(),
            line=line,
        )
        logger.debug("line %s: %s %s", line, parsed.keyword, parsed.body)

        messages: list[Message] = []
        self._collectors.append(messages)
        try:
            handler = self._handlers.get(parsed.keyword)
            if handler is None:
                self._emit(error(f'invalid command "{first}"', line))
            else:
                handler(parsed)
        finally:
            self._collectors.pop()
        return messages

    def run_file(self, filename: str) -> list[Message]:
        """
        Load filename: restore a snapshot or replay a command script.

        Returns:
            Every message emitted while loading.
        """
        if self.finished:
            return []

        messages: list[Message] = []
        self._collectors.append(messages)
        try:
            self._load(_Command(keyword="LOAD", args=(filename,), body=filename, line=None))
        finally:
            self._collectors.pop()
        return messages

    def close(self) -> None:
        self.log_sink.close()

    def __enter__(self) -> Interpreter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _emit(self, message: Message) -> None:
        rendered = message.render()
        self.output(rendered)
        self.log_sink.write(rendered)
        for collector in self._collectors:
            collector.append(message)

    def _arity_error(self, cmd: _Command, expected: str) -> None:
        self._emit(error(f"{cmd.keyword} {expected}", cmd.line))

    # ------------------------------------------------------------------
    # Definition commands
    # ------------------------------------------------------------------

    def _symbols(self, cmd: _Command) -> None:
        if not cmd.args:
            self._emit(info(" ".join(("SYMBOLS",) + self.automaton.symbols)))
            return

        invalid = []
        for token in cmd.args:
            char = strip_punctuation(token)
            if not is_symbol(char):
                invalid.append(token)
            elif self.automaton.has_symbol(char):
                self._emit(warning(f"symbol {char.upper()} was already declared", cmd.line))
            else:
                self.automaton.add_symbols([char])

        if invalid:
            self._emit(warning(f"invalid symbols: {', '.join(invalid)}", cmd.line))

    def _states(self, cmd: _Command) -> None:
        if not cmd.args:
            self._emit(info(" ".join(("STATES",) + self.automaton.states)))
            return

        for token in cmd.args:
            name = strip_punctuation(token)
            if not is_state_name(name):
                self._emit(error(f"invalid state name {token}", cmd.line))
            elif self.automaton.has_state(name):
                self._emit(warning(f"state {name.upper()} was already declared", cmd.line))
            else:
                self.automaton.add_states([name])

    def _initial_state(self, cmd: _Command) -> None:
        if not cmd.args:
            self._arity_error(cmd, "requires a state name")
            return
        if len(cmd.args) > 1:
            self._arity_error(cmd, "takes exactly one state name")
            return

        name = strip_punctuation(cmd.args[0])
        if not is_state_name(name):
            self._emit(error(f"invalid state name {cmd.args[0]}", cmd.line))
            return
        if not self.automaton.has_state(name):
            self._emit(warning(f"state {name.upper()} was not previously declared", cmd.line))
        self.automaton.set_initial_state(name)

    def _final_states(self, cmd: _Command) -> None:
        if not cmd.args:
            self._arity_error(cmd, "requires at least one state name")
            return

        for token in cmd.args:
            name = strip_punctuation(token)
            if not is_state_name(name):
                self._emit(error(f"invalid state name {token}", cmd.line))
                continue
            if not self.automaton.has_state(name):
                self._emit(warning(f"state {name.upper()} was not previously declared", cmd.line))
            elif self.automaton.is_final(name):
                self._emit(
                    warning(f"state {name.upper()} was already declared as a final state", cmd.line)
                )
                continue
            self.automaton.add_final_states([name])

    def _transitions(self, cmd: _Command) -> None:
        batch: dict[tuple[str, str], Transition] = {}

        for group in cmd.body.split(","):
            parts = [strip_punctuation(part) for part in group.split()]
            if not parts:
                continue
            if len(parts) != 3:
                self._emit(
                    error(
                        f'invalid transition "{group.strip()}": expected symbol, source and target',
                        cmd.line,
                    )
                )
                continue

            symbol, source, target = parts
            if not is_symbol(symbol) or not self.automaton.has_symbol(symbol):
                self._emit(error(f"symbol {symbol} is not declared", cmd.line))
                continue
            undeclared = [
                name
                for name in (source, target)
                if not is_state_name(name) or not self.automaton.has_state(name)
            ]
            if undeclared:
                for name in undeclared:
                    self._emit(error(f"state {name} is not declared", cmd.line))
                continue

            transition = Transition(symbol, source, target)
            existing = batch.get(transition.key) or self.automaton.transition_for(symbol, source)
            if existing is not None:
                if existing.target == transition.target:
                    self._emit(
                        warning(f"transition {transition} already exists with same target", cmd.line)
                    )
                else:
                    self._emit(
                        warning(
                            f"transition {transition.symbol} {transition.source} "
                            f"overridden: {existing.target} -> {transition.target}",
                            cmd.line,
                        )
                    )
                batch.pop(transition.key, None)
            batch[transition.key] = transition

        if batch:
            self.automaton.add_transitions(batch.values())

    def _clear(self, cmd: _Command) -> None:
        if cmd.args:
            self._arity_error(cmd, "does not take any arguments")
            return
        self.automaton.clear()

    # ------------------------------------------------------------------
    # Output and execution
    # ------------------------------------------------------------------

    def _print(self, cmd: _Command) -> None:
        if len(cmd.args) > 1:
            self._arity_error(cmd, "takes at most one file name")
            return

        if not cmd.args:
            lines = render_configuration(self.automaton)
            if not lines:
                self._emit(info("automaton is empty"))
            for text in lines:
                self._emit(info(text))
            return

        filename = cmd.args[0]
        try:
            write_configuration(
                self.automaton, self.config.resolve(filename), encoding=self.config.encoding
            )
        except OSError as exc:
            logger.debug("PRINT to %s failed: %s", filename, exc)
            self._emit(error(f"cannot write file {filename}", cmd.line))
            return
        self._emit(info(f"configuration written to file {filename}"))

    def _execute(self, cmd: _Command) -> None:
        if not cmd.args:
            self._arity_error(cmd, "requires an input string")
            return
        if len(cmd.args) > 1:
            self._arity_error(cmd, "takes exactly one input string")
            return
        if self.automaton.initial_state is None:
            self._emit(error("no initial state defined", cmd.line))
            return

        result = run(self.automaton, cmd.args[0])
        if result.ok:
            self._emit(info(str(result)))
        else:
            self._emit(error(result.error, cmd.line))

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _compile(self, cmd: _Command) -> None:
        if not cmd.args:
            self._arity_error(cmd, "requires a file name")
            return
        if len(cmd.args) > 1:
            self._arity_error(cmd, "takes exactly one file name")
            return

        filename = cmd.args[0]
        if not self.config.is_compile_target(filename):
            self._emit(error(f"invalid file name {filename}: expected a .fsm or .bin name", cmd.line))
            return
        try:
            save_snapshot(self.automaton, self.config.resolve(filename))
        except OSError as exc:
            logger.debug("COMPILE to %s failed: %s", filename, exc)
            self._emit(error(f"cannot create file {filename}", cmd.line))
            return
        self._emit(info(f"compiled to file {filename}"))

    def _load(self, cmd: _Command) -> None:
        if not cmd.args:
            self._arity_error(cmd, "requires a file name")
            return
        if len(cmd.args) > 1:
            self._arity_error(cmd, "takes exactly one file name")
            return

        filename = cmd.args[0]
        if self.config.is_binary(filename):
            self._load_snapshot(filename, cmd.line)
        else:
            self._replay(filename, cmd.line)

    def _load_snapshot(self, filename: str, line: Optional[int]) -> None:
        try:
            loaded = load_snapshot(self.config.resolve(filename))
        except FileNotFoundError:
            self._emit(error(f"cannot open file {filename}", line))
            return
        except SnapshotError as exc:
            self._emit(error(f"cannot load {filename}: {exc}", line))
            return
        except OSError as exc:
            logger.debug("LOAD of %s failed: %s", filename, exc)
            self._emit(error(f"cannot read file {filename}", line))
            return
        self.automaton.replace(loaded)
        self._emit(info(f"loaded {filename}"))

    def _replay(self, filename: str, line: Optional[int]) -> None:
        path = self.config.resolve(filename)
        key = path.resolve()
        if key in self._loading:
            self._emit(error(f"recursive load of {filename}", line))
            return

        try:
            with open(path, "r", encoding=self.config.encoding) as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("LOAD of %s failed: %s", filename, exc)
            self._emit(error(f"cannot open file {filename}", line))
            return

        assembler = CommandAssembler(self.config.comment_prefix)
        self._loading.append(key)
        try:
            for line_number, text in enumerate(lines, start=1):
                for command_line, command in assembler.feed(text, line_number):
                    self.process(command, command_line)
                    if self.finished:
                        return
        finally:
            self._loading.pop()

        if assembler.pending:
            self._emit(
                warning(f'unterminated command at end of {filename}: "{assembler.pending}"', len(lines))
            )

    def _log(self, cmd: _Command) -> None:
        if len(cmd.args) > 1:
            self._arity_error(cmd, "takes at most one file name")
            return

        if cmd.args:
            filename = cmd.args[0]
            try:
                self.log_sink.open(self.config.resolve(filename))
            except OSError as exc:
                logger.debug("LOG to %s failed: %s", filename, exc)
                self._emit(error(f"cannot create log file {filename}", cmd.line))
            return

        if self.log_sink.active:
            self.log_sink.close()
            self._emit(info("STOPPED LOGGING"))
        else:
            self._emit(info("LOGGING was not enabled"))

    def _exit(self, cmd: _Command) -> None:
        if cmd.args:
            self._arity_error(cmd, "does not take any arguments")
            return
        self._emit(info(TERMINATED))
        self.log_sink.close()
        self.finished = True
