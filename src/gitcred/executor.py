"""Run one credential helper and parse its reply.

A helper is launched as ``<shell> -c "<command> get"``. It receives the
known request fields on stdin and answers on stdout, one ``key=value`` pair
per line::

    stdin                       stdout
    -----                       ------
    protocol=https              username=alice
    host=example.com            password=s3cret
    username=alice

Helpers are untrusted and often absent. Every failure (the shell cannot be
spawned, the helper exits non-zero, a pipe breaks, the optional timeout
expires) yields an empty :class:`~gitcred.models.ParsedReply`. Nothing
raised here reaches the caller, and nothing logged here names the helper's
output.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Optional

from gitcred.models import ParsedReply

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "sh"


def build_input(
    protocol: Optional[str],
    host: Optional[str],
    username: Optional[str],
) -> bytes:
    """Encode the request fields a helper reads on stdin.

    Fields are written in the order ``protocol``, ``host``, ``username``;
    any field that is still unknown is left out.

    Raises:
        ValueError: If a value contains a newline or NUL byte, which would
            let it inject extra fields, or cannot be encoded as UTF-8.
    """
    lines = []
    for key, value in (("protocol", protocol), ("host", host), ("username", username)):
        if value is None:
            continue
        if "\n" in value or "\x00" in value:
            raise ValueError(f"{key} contains a newline or NUL byte")
        lines.append(f"{key}={value}\n")
    return "".join(lines).encode("utf-8")


def parse_output(output: bytes) -> ParsedReply:
    """Read the ``username`` and ``password`` fields out of a helper's stdout.

    The raw bytes are split into lines and each line at its first ``=``
    before any text decoding happens. A line without ``=``, or whose value is
    not valid UTF-8, is dropped on its own. Unknown keys are ignored and the
    first occurrence of each recognised key wins.

    Args:
        output: Everything the helper wrote to stdout.

    Returns:
        The fields found, each ``None`` if absent.
    """
    fields: dict[bytes, str] = {}
    for line in output.split(b"\n"):
        key, sep, raw_value = line.partition(b"=")
        if not sep or key not in (b"username", b"password") or key in fields:
            continue
        try:
            fields[key] = raw_value.decode("utf-8")
        except UnicodeDecodeError:
            continue
    return ParsedReply(username=fields.get(b"username"), password=fields.get(b"password"))


def _abandon(proc: subprocess.Popen) -> None:
    """Kill and reap *proc* without draining its pipes.

    Children of the shell may still hold the pipes open, so waiting for EOF
    could block long after the shell itself is gone.
    """
    proc.kill()
    proc.wait()
    for stream in (proc.stdin, proc.stdout, proc.stderr):
        if stream is not None:
            try:
                stream.close()
            except OSError:
                pass


def run_helper(
    command: str,
    protocol: Optional[str] = None,
    host: Optional[str] = None,
    username: Optional[str] = None,
    shell: str = DEFAULT_SHELL,
    timeout: Optional[float] = None,
) -> ParsedReply:
    """Execute a normalized helper command with the ``get`` action.

    Args:
        command: A command line produced by
            :func:`~gitcred.normalize.normalize_command`.
        protocol: Request protocol, if known.
        host: Request host, if known.
        username: Username already known to the caller, if any.
        shell: POSIX-compatible shell used as the launcher.
        timeout: Seconds to wait before killing the helper. ``None`` waits
            indefinitely.

    Returns:
        The helper's reply, or an empty :class:`ParsedReply` if the helper
        failed in any way.
    """
    try:
        payload = build_input(protocol, host, username)
    except ValueError as exc:
        logger.debug("Not running credential helper: %s", exc)
        return ParsedReply()

    try:
        proc = subprocess.Popen(
            [shell, "-c", f"{command} get"],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except (OSError, ValueError) as exc:
        logger.debug("Could not spawn credential helper via %s: %s", shell, exc)
        return ParsedReply()

    # communicate() swallows EPIPE when the helper never reads its stdin.
    try:
        stdout, _stderr = proc.communicate(
            input=payload,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        _abandon(proc)
        logger.debug("Credential helper timed out after %ss", timeout)
        return ParsedReply()
    except OSError as exc:
        _abandon(proc)
        logger.debug("I/O error talking to credential helper: %s", exc)
        return ParsedReply()

    if proc.returncode != 0:
        logger.debug("Credential helper exited with status %d", proc.returncode)
        return ParsedReply()
    return parse_output(stdout)
