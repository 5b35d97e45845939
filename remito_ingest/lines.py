from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .config import DEFAULT_PROFILE, LayoutProfile
from .models import PositionedRun


@dataclass
class PageText:
    lines: List[str] = field(default_factory=list)
    stopped: bool = False        # a duplicate-copy marker was found


def has_stop_marker(text: str, profile: LayoutProfile = DEFAULT_PROFILE) -> bool:
    return any(marker in text for marker in profile.stop_markers)


def group_runs(runs: Iterable[PositionedRun], tolerance: float) -> List[List[PositionedRun]]:
    """Group runs into visual lines, top of the page first.

    Runs are bucketed by rounded ``y``.  Neighbouring buckets closer than
    ``tolerance`` belong to the same printed line (baseline jitter).
    """
    by_y: Dict[int, List[PositionedRun]] = {}
    for run in runs:
        by_y.setdefault(int(round(run.y)), []).append(run)

    groups: List[List[PositionedRun]] = []
    last_key = None
    for key in sorted(by_y, reverse=True):
        if last_key is not None and abs(key - last_key) < tolerance:
            groups[-1].extend(by_y[key])
        else:
            groups.append(list(by_y[key]))
        last_key = key
    return groups


def assemble_line(runs: List[PositionedRun], units_per_space: float) -> str:
    """Join runs left to right, padding gaps with spaces to keep columns."""
    text = ""
    last_end = 0.0
    for run in sorted(runs, key=lambda r: r.x):
        gap = int(math.floor(max(0.0, run.x - last_end) / units_per_space))
        text += " " * gap + run.text
        last_end = run.x + max(run.width, len(run.text) * units_per_space)
    return text


def reconstruct_lines(
    runs: Iterable[PositionedRun], profile: LayoutProfile = DEFAULT_PROFILE
) -> PageText:
    """Rebuild the text lines of one page.

    Stops at the first line carrying a duplicate-copy marker and flags the
    page; lines above the marker are kept.
    """
    page = PageText()
    for group in group_runs(runs, profile.line_tolerance):
        if any(has_stop_marker(run.text, profile) for run in group):
            page.stopped = True
            break
        line = assemble_line(group, profile.units_per_space)
        if has_stop_marker(line, profile):
            page.stopped = True
            break
        page.lines.append(line)
    return page
