"""
BAC-over-time graph. Produces an image file or returns data for a web frontend.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from buzzgauge.session import Session, now_ms


def curve_data(session: Session, now: int) -> List[dict]:
    """Curve samples as plain dicts for any frontend."""
    return [{"time": s.time, "level": s.level, "is_peak": s.is_peak} for s in session.curve(now)]


def _to_datetime(ms: float) -> datetime:
    return datetime.fromtimestamp(ms / 1000.0)


def save_bac_graph(
    session: Session,
    output_path: str = "bac_graph.png",
    now: Optional[int] = None,
    title: str = "BAC over time",
) -> str:
    """
    Plot the BAC curve with matplotlib and save to file.
    Returns path to saved file. Requires: pip install matplotlib
    """
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.dates as mdates
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for save_bac_graph. pip install matplotlib")

    if now is None:
        now = now_ms()
    samples = session.curve(now)
    limit = session.profile.legal_limit_percent

    fig, ax = plt.subplots(figsize=(10, 5))
    if samples:
        times = [_to_datetime(s.time) for s in samples]
        levels = [s.level for s in samples]
        ax.plot(times, levels, color="#2563eb", linewidth=2, label="BAC")
        ax.fill_between(times, levels, alpha=0.2, color="#2563eb")
        peaks = [s for s in samples if s.is_peak]
        ax.scatter(
            [_to_datetime(s.time) for s in peaks],
            [s.level for s in peaks],
            color="#2563eb",
            zorder=3,
            label="Drink",
        )
        ax.axvline(x=_to_datetime(now), color="#6b7280", linestyle=":", linewidth=1, label="Now")
    ax.axhline(y=limit, color="#dc2626", linestyle="--", linewidth=1, label=f"Legal limit ({limit:.2f}%)")
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%H:%M"))
    ax.set_xlabel("Time")
    ax.set_ylabel("BAC (%)")
    ax.set_title(title)
    ax.legend(loc="upper right")
    ax.set_ylim(bottom=0)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
