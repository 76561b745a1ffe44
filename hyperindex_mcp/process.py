"""
External command execution for the scaffold tool.

The Envio code generator may stop at interactive prompts even when every
value is passed as a flag, so InitStrategy runs it at most twice:

1) primary attempt with stdin closed
2) one fallback attempt that presses Enter a few times after a short delay

Both attempts share a hard per-attempt timeout. The strategy never raises for
a failing command; callers inspect the StrategyOutcome.
"""

import asyncio
import logging
import os
import signal
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

_READ_CHUNK = 4096


@dataclass(frozen=True)
class CommandResult:
    exit_code: Optional[int]
    output: str
    timed_out: bool = False
    spawn_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.spawn_error is None and not self.timed_out and self.exit_code == 0

    def describe(self) -> str:
        if self.spawn_error is not None:
            return f"could not start command: {self.spawn_error}"
        if self.timed_out:
            return "command timed out"
        return f"command exited with status {self.exit_code}"


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        if hasattr(os, "killpg"):
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        logger.debug(f"process {proc.pid} already exited")


async def run_shell(
    command: str,
    timeout: float,
    stdin_feed: Optional[Tuple[float, bytes]] = None,
) -> CommandResult:
    """
    Run ``command`` through the shell with stdout and stderr combined.

    ``stdin_feed`` is ``(delay_seconds, data)``: the data is written to the
    child's stdin after the delay and stdin is then closed. Without it stdin
    is /dev/null. On timeout the whole process group is killed and whatever
    output was collected so far is returned. Cancelling the caller kills the
    process group too.
    """
    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.PIPE if stdin_feed else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            start_new_session=True,
        )
    except OSError as e:
        return CommandResult(exit_code=None, output="", spawn_error=str(e))

    chunks: List[bytes] = []

    async def feed() -> None:
        delay, data = stdin_feed
        await asyncio.sleep(delay)
        try:
            proc.stdin.write(data)
            await proc.stdin.drain()
            logger.debug(f"sent {len(data)} bytes of synthetic input to pid {proc.pid}")
        except (BrokenPipeError, ConnectionResetError):
            logger.debug(f"pid {proc.pid} closed stdin before synthetic input was sent")
        finally:
            proc.stdin.close()

    async def collect() -> None:
        while True:
            chunk = await proc.stdout.read(_READ_CHUNK)
            if not chunk:
                break
            chunks.append(chunk)
        await proc.wait()

    collector = asyncio.ensure_future(collect())
    tasks = [collector]
    if stdin_feed:
        tasks.append(asyncio.ensure_future(feed()))

    try:
        await asyncio.wait([collector], timeout=timeout)
        timed_out = not collector.done()
        if timed_out:
            logger.warning(f"command timed out after {timeout}s, killing pid {proc.pid}")
        else:
            collector.result()
    finally:
        # Also reached when the caller is cancelled: never leave the child running.
        for task in tasks:
            task.cancel()
        if proc.returncode is None:
            _kill(proc)
            await proc.wait()

    output = b"".join(chunks).decode("utf-8", errors="replace")
    return CommandResult(exit_code=proc.returncode, output=output, timed_out=timed_out)


@dataclass(frozen=True)
class Attempt:
    label: str
    result: CommandResult
    succeeded: bool
    message: str


@dataclass
class StrategyOutcome:
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.attempts) and self.attempts[-1].succeeded

    @property
    def output(self) -> str:
        return self.attempts[-1].result.output if self.attempts else ""

    def failure_report(self) -> str:
        lines = []
        for attempt in self.attempts:
            lines.append(f"{attempt.label} attempt failed: {attempt.message}")
            tail = attempt.result.output.strip()
            if tail:
                lines.append(f"--- {attempt.label} output ---")
                lines.append(tail[-2000:])
        return "\n".join(lines)


@dataclass(frozen=True)
class InitStrategy:
    command: str
    timeout: float = 300.0
    fallback_delay: float = 2.0
    fallback_keystrokes: int = 10
    success_markers: Tuple[str, ...] = ()
    # Shown in logs instead of ``command`` (secrets masked).
    display_command: Optional[str] = None

    def _judge(self, label: str, result: CommandResult) -> Attempt:
        if not result.ok:
            return Attempt(label, result, False, result.describe())
        if self.success_markers and not any(m in result.output for m in self.success_markers):
            return Attempt(
                label,
                result,
                False,
                "command exited with status 0 but its output did not confirm initialization",
            )
        return Attempt(label, result, True, "ok")

    async def run(self) -> StrategyOutcome:
        shown = self.display_command or self.command
        outcome = StrategyOutcome()

        logger.info(f"Running: {shown}")
        primary = self._judge("primary", await run_shell(self.command, self.timeout))
        outcome.attempts.append(primary)
        if primary.succeeded:
            return outcome

        logger.warning(f"Primary attempt failed ({primary.message}); retrying with synthetic input")
        keystrokes = b"\n" * max(self.fallback_keystrokes, 0)
        fallback = self._judge(
            "fallback",
            await run_shell(
                self.command,
                self.timeout,
                stdin_feed=(self.fallback_delay, keystrokes),
            ),
        )
        outcome.attempts.append(fallback)
        if not fallback.succeeded:
            logger.error(f"Fallback attempt failed ({fallback.message})")
        return outcome
