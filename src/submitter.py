"""Transaction submission through the `iota` CLI, which holds the active keypair."""

import asyncio
import json
import logging

from config.config_loader import LedgerConfig, SubmitterConfig
from src.ledger.base import SubmissionError, TransactionSubmitter
from src.models import CreateDebateIntent, JoinDebateIntent, Receipt

logger = logging.getLogger(__name__)


def build_call_args(
    intent: CreateDebateIntent | JoinDebateIntent,
    ledger: LedgerConfig,
    gas_budget: int,
) -> list[str]:
    """Return the `iota client call` arguments for one intent."""
    if isinstance(intent, CreateDebateIntent):
        function = "create_debate"
        move_args = [intent.topic, intent.description]
    elif isinstance(intent, JoinDebateIntent):
        function = "join_debate"
        move_args = [intent.debate_id, str(intent.side)]
    else:
        raise TypeError(f"Unsupported intent: {type(intent).__name__}")

    return [
        "client", "call",
        "--package", ledger.package_id,
        "--module", ledger.module,
        "--function", function,
        "--args", *move_args,
        "--gas-budget", str(gas_budget),
        "--json",
    ]


def parse_receipt(stdout: str) -> Receipt:
    """Parse the CLI's JSON transaction response.

    Raises:
        SubmissionError: If the output is not JSON or the effects did not succeed.
    """
    try:
        raw = json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise SubmissionError(f"Unreadable CLI output: {stdout[:200]!r}") from exc
    if not isinstance(raw, dict):
        raise SubmissionError("Unexpected CLI output shape")

    status = ((raw.get("effects") or {}).get("status") or {})
    if status and status.get("status") != "success":
        raise SubmissionError(f"Transaction failed: {status.get('error', status.get('status'))}")

    digest = raw.get("digest")
    if not digest:
        raise SubmissionError("CLI output has no transaction digest")
    return Receipt(digest=str(digest), raw=raw)


class IotaCliSubmitter(TransactionSubmitter):
    """Signs and executes Move calls with the locally configured `iota` CLI."""

    def __init__(self, ledger: LedgerConfig, config: SubmitterConfig) -> None:
        self._ledger = ledger
        self._config = config

    async def submit(self, intent: CreateDebateIntent | JoinDebateIntent) -> Receipt:
        if not self._ledger.package_id:
            raise SubmissionError("No package id configured")
        args = build_call_args(intent, self._ledger, self._config.gas_budget)
        logger.debug("Running %s %s", self._config.cli_path, " ".join(args))

        try:
            proc = await asyncio.create_subprocess_exec(
                self._config.cli_path,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise SubmissionError(f"CLI not found: {self._config.cli_path}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._config.timeout_sec)
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise SubmissionError(f"Transaction timed out after {self._config.timeout_sec}s") from exc

        if proc.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip().splitlines()
            raise SubmissionError(
                f"CLI exited with {proc.returncode}: {message[-1] if message else 'no output'}"
            )

        receipt = parse_receipt(stdout.decode("utf-8", errors="replace"))
        logger.info("Transaction %s executed", receipt.digest)
        return receipt
