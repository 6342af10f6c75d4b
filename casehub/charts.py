from __future__ import annotations

from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

ACTIVE_COLOR = "#1e293b"
INACTIVE_COLOR = "#e2e8f0"


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def bar_spec(
    df: pd.DataFrame,
    *,
    x: str,
    y: str,
    x_title: str,
    y_title: str,
    sort: Optional[list] = None,
    highlight_max: bool = True,
) -> Dict[str, Any]:
    """Bar chart spec; the tallest bar(s) are drawn in the active color."""
    data = df.copy()
    if highlight_max and not data.empty:
        top = data[y].max()
        data["is_max"] = data[y].eq(top)
    else:
        data["is_max"] = False
    hover = alt.selection_point(fields=[x], on="mouseover", empty="all")
    chart = (
        alt.Chart(data)
        .mark_bar(cornerRadius=12)
        .encode(
            x=alt.X(f"{x}:N", title=x_title, sort=sort, axis=alt.Axis(grid=False, labelAngle=0)),
            y=alt.Y(f"{y}:Q", title=y_title, axis=alt.Axis(format="d", gridDash=[3, 3], domain=False, ticks=False)),
            color=alt.condition(alt.datum.is_max, alt.value(ACTIVE_COLOR), alt.value(INACTIVE_COLOR)),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[alt.Tooltip(f"{x}:N", title=x_title), alt.Tooltip(f"{y}:Q", title=y_title)],
        )
        .add_params(hover)
        .properties(height=260)
    )
    return to_vega_spec(chart)
