from __future__ import annotations

from ..models.import_outcome import ImportOutcome

"""Summary rendering for an import outcome.

Two forms: the machine-readable SUMMARY line printed by the CLI, and the
one-sentence message shown to the administrator after an upload.
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: ImportOutcome) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY rows={total} success={success} failed={failed} elapsed_sec={elapsed}

    ``failed`` counts rows that were rejected or could not be persisted.

    Examples:
        >>> render_summary_line(ImportOutcome(success_count=2, total_rows=3, errors=["Row 3: x"], elapsed_seconds=1.0))
        'SUMMARY rows=3 success=2 failed=1 elapsed_sec=1'
    """
    return (
        f"SUMMARY rows={outcome.total_rows} "
        f"success={outcome.success_count} "
        f"failed={outcome.failed_count} "
        f"elapsed_sec={_format_seconds(outcome.elapsed_seconds)}"
    )


def render_outcome_message(outcome: ImportOutcome) -> str:
    """Message for the admin console, e.g.

    "Successfully imported 2 products out of 3 rows. Errors: Row 3: Invalid price format"
    """
    message = (
        f"Successfully imported {outcome.success_count} products "
        f"out of {outcome.total_rows} rows."
    )
    if outcome.errors:
        message += f" Errors: {'; '.join(outcome.errors)}"
    return message
