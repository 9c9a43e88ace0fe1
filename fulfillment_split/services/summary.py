from __future__ import annotations

from ..models.analysis_result import RunResult

"""SUMMARY line rendering.

Format:
SUMMARY files={total} success={success} failed={failed} orders={orders}
multi_location_orders={multi} related_rows={rows} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: RunResult) -> str:
    """Render the SUMMARY line for a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = RunResult(
        ...     success_files=1, failed_files=0, total_orders=12, multi_location_orders=3,
        ...     related_rows=8, start_time=t, end_time=t, elapsed_seconds=0.5,
        ... )
        >>> render_summary_line(r)
        'SUMMARY files=1 success=1 failed=0 orders=12 multi_location_orders=3 related_rows=8 elapsed_sec=0.5'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"orders={result.total_orders} "
        f"multi_location_orders={result.multi_location_orders} "
        f"related_rows={result.related_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
