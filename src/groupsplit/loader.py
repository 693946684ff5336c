"""Reading ledger documents produced by the web client."""

import logging
from pathlib import Path

from pydantic import ValidationError

from .exceptions import LedgerFileError
from .models import Ledger

logger = logging.getLogger(__name__)


def load_ledger(path: Path) -> Ledger:
    """
    Load a ledger document: ``{"people": [...], "expenses": [...]}``.

    Field names are camelCase, as stored by the client. Expenses without a
    ``deductions`` key get an empty list.

    Raises:
        LedgerFileError: If the file is missing or is not a valid ledger
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LedgerFileError(f"Cannot read ledger file {path}: {e}") from e

    try:
        ledger = Ledger.model_validate_json(raw)
    except ValidationError as e:
        raise LedgerFileError(f"Invalid ledger file {path}:\n{e}") from e

    logger.info(
        f"Loaded {len(ledger.people)} people and {len(ledger.expenses)} expenses "
        f"from {path}"
    )
    return ledger
