from __future__ import annotations


class StackliteError(Exception):
    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.message = str(message)
        self.line = line
        super().__init__(self.message)


class ConfigError(StackliteError):
    pass


class LexicalTokenError(StackliteError):
    def __init__(self, token: str, *, line: int) -> None:
        self.token = token
        super().__init__(f"Invalid token `{token}` at line: {line}", line=line)


class StackUnderflowError(StackliteError):
    def __init__(
        self,
        *,
        kind: str,
        needed: int,
        available: int,
        ip: int,
        line: int | None = None,
    ) -> None:
        self.kind = kind
        self.needed = needed
        self.available = available
        self.ip = ip
        where = f" at line: {line}" if line is not None else ""
        super().__init__(
            f"Stack underflow: `{kind}` needs {needed} value(s) but the stack holds "
            f"{available} (instruction {ip}){where}",
            line=line,
        )


class ResourceError(StackliteError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class InvocationError(StackliteError):
    def __init__(self, cmd: str, *, returncode: int | None = None, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            msg = f"could not run `{cmd}`"
        else:
            msg = f"`{cmd}` exited with status {returncode}"
        detail = stderr.strip().splitlines()
        if detail:
            msg += f": {detail[0]}"
        super().__init__(msg)
