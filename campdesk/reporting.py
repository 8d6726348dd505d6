"""Text summaries of a scheduling window and a pricing preview, built with pandas."""

from __future__ import annotations

from typing import Dict, Iterable, Set

import pandas as pd

from campdesk.domain.models import RateCard, Shift, StaffMember
from campdesk.services.pricing import PricingPreview, incentive_label
from campdesk.services.shifts import duration_minutes, member_display_name


def shifts_frame(shifts: Iterable[Shift], conflicts: Set[str] | None = None) -> pd.DataFrame:
    conflicts = conflicts or set()
    rows = [
        {
            "shift_id": s.shift_id,
            "user_id": s.user_id or "unknown",
            "date": s.shift_date.isoformat() if s.shift_date else None,
            "start": s.start_time.strftime("%H:%M") if s.start_time else None,
            "end": s.end_time.strftime("%H:%M") if s.end_time else None,
            "role": s.role,
            "status": s.status or "scheduled",
            "minutes": duration_minutes(s),
            "conflict": s.shift_id in conflicts,
        }
        for s in shifts
    ]
    columns = ["shift_id", "user_id", "date", "start", "end", "role", "status", "minutes", "conflict"]
    return pd.DataFrame(rows, columns=columns)


def summarize_shifts(
    shifts: Iterable[Shift],
    conflicts: Set[str],
    members: Iterable[StaffMember] = (),
) -> str:
    """Text summary of a scheduling window: per-day status counts, hours per person, conflicts."""
    df = shifts_frame(shifts, conflicts)
    if df.empty:
        return "No shifts."

    names: Dict[str, str] = {m.member_id: member_display_name(m) for m in members}
    df["person"] = df["user_id"].map(lambda uid: names.get(uid, uid))

    dated = df.dropna(subset=["date"])
    coverage = dated.groupby(["date", "status"]).size().unstack(fill_value=0)
    hours = (df.groupby("person")["minutes"].sum() / 60.0).round(2).sort_values(ascending=False)

    lines = ["Shifts per day per status:"]
    lines.append(coverage.to_string() if not coverage.empty else "(no dated shifts)")
    lines.append("")
    lines.append("Scheduled hours per staff member:")
    lines.append(hours.to_string())
    lines.append("")
    lines.append(f"Total shifts: {len(df)}")
    lines.append(f"Pending approval: {int((df['status'] == 'submitted').sum())}")
    lines.append(f"Conflicts: {int(df['conflict'].sum())}")
    if df["conflict"].any():
        flagged = df[df["conflict"]].sort_values(["date", "person", "start"])
        lines.append(flagged[["shift_id", "person", "date", "start", "end"]].to_string(index=False))
    return "\n".join(lines)


def summarize_preview(rate_card: RateCard, preview: PricingPreview) -> str:
    lines = [f"Pricing preview: {rate_card.name}"]
    lines.append(f"  Base rate      ${rate_card.base_rate:,.2f}")
    for discount in preview.applied_discounts:
        lines.append(f"  {discount.name:<14} -${discount.amount:,.2f}")
    lines.append(f"  Total          ${preview.total:,.2f}")
    if preview.earned_incentives:
        lines.append("  Bonuses earned:")
        for incentive in preview.earned_incentives:
            lines.append(f"    - {incentive_label(incentive)}")
    return "\n".join(lines)
