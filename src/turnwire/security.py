"""Heuristic, non-blocking advice for risky shell commands."""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import cache

# Common locations of credentials, keys and wallets.
SENSITIVE_PATH_MARKERS: tuple[str, ...] = (
    ".ssh",
    ".gnupg",
    "wallet.dat",
    "keystore",
    "metamask",
    "ledger",
    "solana",
    "ethereum",
    "secp256k1",
    "id_rsa",
    "id_ed25519",
    "api_key",
    "private_key",
    "mnemonic",
)


@cache
def _pipe_to_shell_pattern() -> re.Pattern[str]:
    # Only this check ignores case; the substring checks below are case-sensitive.
    return re.compile(r"(curl|wget)[^\n|]*\|\s*(sh|bash)", re.IGNORECASE)


def contains_pipe_to_shell(text: str) -> bool:
    """True for `curl ... | sh` and `wget ... | bash` style installers."""
    return _pipe_to_shell_pattern().search(text) is not None


def touches_sensitive_paths(text: str) -> bool:
    return any(marker in text for marker in SENSITIVE_PATH_MARKERS)


def _bash_lc_script(command: Sequence[str]) -> str | None:
    if len(command) < 3 or command[0] != "bash" or command[1] != "-lc":
        return None
    return command[2]


def compute_security_advice(command: Sequence[str]) -> str | None:
    """Return a short warning for a risky command, or None when nothing matches."""
    if not command:
        return None

    joined = " ".join(command)
    program = command[0]

    if contains_pipe_to_shell(joined):
        return "detected a curl/wget pipeline into a shell; this is dangerous because it executes remote code blindly"
    if program == "rm" and "-rf" in joined:
        return "detected a potentially destructive rm -rf; double-check paths before continuing"
    if program == "chmod" and "777" in joined:
        return "detected chmod 777; avoid world-writable permissions"
    if program == "dd" and ("/dev/" in joined or "of=" in joined):
        return "detected dd to a device/file; verify target to avoid data loss"
    if touches_sensitive_paths(joined):
        return "access to sensitive keys/wallet paths detected; ensure you trust the command"

    script = _bash_lc_script(command)
    if script is not None:
        if contains_pipe_to_shell(script):
            return "detected a curl/wget pipeline into a shell inside bash -lc"
        if "rm -rf" in script:
            return "detected potentially destructive rm -rf inside bash -lc"

    return None
