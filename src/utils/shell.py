import asyncio
from dataclasses import dataclass

import structlog

log = structlog.get_logger()


@dataclass
class CommandResult:
    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


async def run_command(*args: str, timeout: float = 60) -> CommandResult:
    """Run an external tool and capture its raw output.

    A missing executable raises ``FileNotFoundError``; exceeding ``timeout``
    kills the process and raises ``TimeoutError``.
    """
    log.debug("shell_exec", command=args)

    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.communicate()
        raise TimeoutError(f"{args[0]} timed out after {timeout}s")

    result = CommandResult(stdout=stdout, stderr=stderr, returncode=proc.returncode or 0)
    if not result.ok:
        log.warning(
            "shell_error",
            command=args[0],
            returncode=result.returncode,
            stderr=result.stderr_text[:500],
        )
    return result
