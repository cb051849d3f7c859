"""
PDF report generation and reusable chart rendering for the
Auto-Enrolment vs Private Pension projector.

Provides:
  - Multi-page PDF report (generate_pdf)
  - Base64-encoded chart images for web embedding (get_web_charts)
  - Individual page renderers reusable by both CLI and web
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter, MaxNLocator
import numpy as np

import config as cfg
from simulation import SimulationConfig, SimulationResult

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
BLUE = "#3b82f6"
GREEN = "#22c55e"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"
BLUE_LIGHT = "#93c5fd"
GREEN_LIGHT = "#86efac"

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 6

TABLE_ROWS_PER_PAGE = 30
# (header, CLI column width)
TABLE_COLUMNS = [
    ("Yr", 3), ("Salary", 9), ("AE Emp%", 7), ("AE Emp", 7), ("AE Er", 7),
    ("State", 6), ("AE Pot", 10), ("PP Emp%", 7), ("PP Emp", 7), ("PP Er", 7),
    ("PP Pot", 10),
]
TABLE_HEADER = [name for name, _ in TABLE_COLUMNS]


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _eur_fmt(x, _):
    sym = cfg.CURRENCY_SYMBOL
    if abs(x) >= 1e6:
        return f"{sym}{x / 1e6:.1f}M"
    if abs(x) >= 1e3:
        return f"{sym}{x / 1e3:.0f}k"
    return f"{sym}{x:.0f}"


EUR_FMT = FuncFormatter(_eur_fmt)


def _money(x: float) -> str:
    sign = "-" if x < 0 else ""
    return f"{sign}{cfg.CURRENCY_SYMBOL}{abs(x):,.0f}"


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


def _no_data(ax, message: str = "No years to project"):
    ax.text(0.5, 0.5, message, ha="center", va="center",
            transform=ax.transAxes, fontsize=11, color=SLATE)


# ═══════════════════════════════════════════════════════════════════
# Page 1: Summary (text only, dark background)
# ═══════════════════════════════════════════════════════════════════

def _page1_summary(inputs: SimulationConfig, d: Dict, verdict_text: str) -> plt.Figure:
    fig = plt.figure(figsize=(A4W, A4H))
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.93, cfg.APP_TITLE,
             ha="center", fontsize=16, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.91, "Illustrative projection • Not financial advice",
             ha="center", fontsize=10, color=TEXT2)

    y = 0.86
    fig.text(0.08, y, "Your Parameters", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.028
    ae_rate = ("phased 1.5% → 6%" if inputs.use_phased_statutory_rate
               else f"{inputs.statutory_fixed_employee_rate:.1f}% fixed")
    params = [
        f"Age: {inputs.current_age}  |  Retire at: {inputs.retirement_age}  |  "
        f"Years: {d['horizon']}  |  Salary: {_money(inputs.gross_salary)}  |  "
        f"Growth: {inputs.salary_growth_rate:.1f}%/yr",
        f"Return: {inputs.investment_growth_rate:.1f}%  |  Fees: {inputs.fee_rate:.2f}%  |  "
        f"Start pots: {_money(inputs.statutory_scheme_start_balance)} AE, "
        f"{_money(inputs.private_scheme_start_balance)} Private",
        f"AE employee rate: {ae_rate} (employer mirrors)  |  "
        f"Private: {inputs.private_employee_rate:.1f}% + {inputs.private_employer_rate:.1f}%, "
        f"{inputs.private_tax_relief_rate * 100:.0f}% relief",
    ]
    for p in params:
        fig.text(0.10, y, p, fontsize=8.5, color=TEXT2)
        y -= 0.024

    y -= 0.025
    fig.text(0.08, y, "Auto-Enrolment", fontsize=13, color=BLUE, fontweight="bold")
    y -= 0.028
    for line in [
        f"Projected pot at retirement: {_money(d['ae_pot'])}",
        f"Total credited: {_money(d['ae_credited_total'])} "
        f"(State top-up {_money(d['ae_state_total'])})",
        f"Your net cost: {_money(d['ae_net_cost_y1'])} in year 1, "
        f"{_money(d['ae_net_cost_total'])} in total",
    ]:
        fig.text(0.10, y, line, fontsize=9.5, color=TEXT2)
        y -= 0.024

    y -= 0.025
    fig.text(0.08, y, "Private Pension", fontsize=13, color=GREEN, fontweight="bold")
    y -= 0.028
    for line in [
        f"Projected pot at retirement: {_money(d['pp_pot'])}",
        f"Total credited: {_money(d['pp_credited_total'])}",
        f"Your net cost: {_money(d['pp_net_cost_y1'])} in year 1, "
        f"{_money(d['pp_net_cost_total'])} in total",
    ]:
        fig.text(0.10, y, line, fontsize=9.5, color=TEXT2)
        y -= 0.024

    y -= 0.03
    fig.text(0.08, y, "Difference (Private − AE)", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.03
    arrow = "▲" if d["private_higher"] else "▼"
    fig.text(0.10, y, f"{arrow} {_money(d['delta_abs'])} — {d['delta_note']}",
             fontsize=12, color=GREEN if d["private_higher"] else RED, fontweight="bold")
    y -= 0.03

    words = verdict_text.split()
    line = ""
    for word in words:
        if len(line) + len(word) + 1 <= 85:
            line = f"{line} {word}" if line else word
        else:
            fig.text(0.10, y, line, fontsize=9, color=TEXT2)
            y -= 0.022
            line = word
    if line:
        fig.text(0.10, y, line, fontsize=9, color=TEXT2)

    fig.text(0.50, 0.04,
             "For education/illustration only. Does not account for Revenue limits, "
             "provider-specific charges, PRSI/USC, or future rule changes.",
             ha="center", fontsize=7, color=SLATE)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Charts
# ═══════════════════════════════════════════════════════════════════

def _chart_pots(results: SimulationResult, figsize=(A4W, A4H * 0.5)) -> plt.Figure:
    """Pot balance per year for both schemes."""
    s = results.series()
    fig, ax = plt.subplots(figsize=figsize)
    _style(fig, ax)

    if len(s["years"]) == 0:
        _no_data(ax)
    else:
        ax.plot(s["years"], s["statutory_pot"], color=BLUE, linewidth=2.2,
                label="Auto-Enrolment", solid_capstyle="round")
        ax.plot(s["years"], s["private_pot"], color=GREEN, linewidth=2.2,
                label="Private", solid_capstyle="round")
        for series, color in ((s["statutory_pot"], BLUE), (s["private_pot"], GREEN)):
            ax.annotate(_money(series[-1]), (s["years"][-1], series[-1]),
                        textcoords="offset points", xytext=(-4, 6), ha="right",
                        fontsize=8, color=color, fontweight="bold")
        _legend(ax)

    ax.yaxis.set_major_formatter(EUR_FMT)
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.set_xlabel("Year")
    ax.set_ylabel("Pot balance")
    ax.set_title("Projected Pot Balance by Year", fontsize=12, fontweight="bold")
    fig.tight_layout()
    return fig


def _chart_contributions(results: SimulationResult, figsize=(A4W, A4H * 0.5)) -> plt.Figure:
    """Stacked credited contributions per year, AE and Private side by side."""
    s = results.series()
    fig, ax = plt.subplots(figsize=figsize)
    _style(fig, ax)

    years = s["years"]
    if len(years) == 0:
        _no_data(ax)
    else:
        w = 0.4
        x_ae = years - w / 2
        x_pp = years + w / 2
        ax.bar(x_ae, s["statutory_employee"], w, color=BLUE, label="AE employee")
        ax.bar(x_ae, s["statutory_employer"], w, bottom=s["statutory_employee"],
               color=BLUE_LIGHT, label="AE employer")
        ax.bar(x_ae, s["statutory_state"], w,
               bottom=s["statutory_employee"] + s["statutory_employer"],
               color=AMBER, label="State top-up")
        ax.bar(x_pp, s["private_employee"], w, color=GREEN, label="Private employee")
        ax.bar(x_pp, s["private_employer"], w, bottom=s["private_employee"],
               color=GREEN_LIGHT, label="Private employer")
        _legend(ax)

    ax.yaxis.set_major_formatter(EUR_FMT)
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.set_xlabel("Year")
    ax.set_ylabel("Credited this year")
    ax.set_title("Contributions Credited Each Year", fontsize=12, fontweight="bold")
    fig.tight_layout()
    return fig


def _chart_net_cost(d: Dict[str, Any], figsize=(A4W, A4H * 0.4)) -> plt.Figure:
    """Year-one out-of-pocket cost to the employee for each scheme."""
    fig, ax = plt.subplots(figsize=figsize)
    _style(fig, ax)

    labels = ["Auto-Enrolment", "Private"]
    values = np.array([d["ae_net_cost_y1"], d["pp_net_cost_y1"]])
    bars = ax.bar(labels, values, color=[BLUE, GREEN], width=0.5)
    for bar, val in zip(bars, values):
        ax.annotate(_money(val), (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    textcoords="offset points", xytext=(0, 4), ha="center",
                    fontsize=9, color=TEXT, fontweight="bold")

    ax.yaxis.set_major_formatter(EUR_FMT)
    ax.set_ylabel("Net employee cost")
    ax.set_title("Annual Out-of-Pocket (Employee, Year 1)", fontsize=12, fontweight="bold")
    fig.tight_layout()
    return fig


# ═══════════════════════════════════════════════════════════════════
# Year-by-year table pages
# ═══════════════════════════════════════════════════════════════════

def table_cells(results: SimulationResult) -> List[List[str]]:
    """Formatted year-by-year table cells (shared by CLI, web and PDF)."""
    return [
        [
            str(r.year),
            _money(r.salary_this_year),
            f"{r.statutory_employee_rate * 100:.1f}%",
            _money(r.statutory_employee_contribution),
            _money(r.statutory_employer_contribution),
            _money(r.statutory_state_top_up),
            _money(r.statutory_pot_balance),
            f"{r.private_employee_rate * 100:.1f}%",
            _money(r.private_employee_contribution),
            _money(r.private_employer_contribution),
            _money(r.private_pot_balance),
        ]
        for r in results.rows
    ]


def _table_pages(results: SimulationResult) -> List[plt.Figure]:
    cells = table_cells(results)
    pages = []
    for start in range(0, len(cells), TABLE_ROWS_PER_PAGE):
        chunk = cells[start:start + TABLE_ROWS_PER_PAGE]
        fig = plt.figure(figsize=(A4W, A4H))
        fig.patch.set_facecolor(BG)
        ax = fig.add_axes([0.03, 0.05, 0.94, 0.85])
        ax.axis("off")
        tbl = ax.table(cellText=chunk, colLabels=TABLE_HEADER,
                       loc="upper center", cellLoc="right")
        tbl.auto_set_font_size(False)
        tbl.set_fontsize(6.5)
        tbl.scale(1, 1.35)
        for (row, col), cell in tbl.get_celld().items():
            cell.set_edgecolor(BORDER)
            cell.set_facecolor(CARD if row else BG)
            color = TEXT
            if row and col == 6:
                color = BLUE_LIGHT
            elif row and col == 10:
                color = GREEN_LIGHT
            cell.get_text().set_color(color)
        first, last = chunk[0][0], chunk[-1][0]
        fig.text(0.50, 0.94, f"Year-by-Year Projection (years {first}–{last})",
                 ha="center", fontsize=13, color=TEXT, fontweight="bold")
        pages.append(fig)
    return pages


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(
    inputs: SimulationConfig,
    results: SimulationResult,
    d: Dict[str, Any],
    verdict_text: str,
    path: str = cfg.PDF_PATH,
) -> str:
    """Generate the full PDF report. Returns the file path."""
    pages = [
        _page1_summary(inputs, d, verdict_text),
        _chart_pots(results),
        _chart_contributions(results),
        _chart_net_cost(d),
    ]
    pages.extend(_table_pages(results))

    try:
        with PdfPages(path) as pdf:
            for fig in pages:
                pdf.savefig(fig, facecolor=fig.get_facecolor())
    finally:
        for fig in pages:
            plt.close(fig)
    logger.info("Wrote %d-page report to %s", len(pages), path)
    return path


def get_web_charts(
    results: SimulationResult,
    d: Dict[str, Any],
) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Returns 3 charts:
      [0] Pot balance by year  (the hero chart)
      [1] Contributions credited each year
      [2] Year-one net employee cost
    """
    chart_figs = [
        _chart_pots(results, figsize=(WEB_W, WEB_H)),
        _chart_contributions(results, figsize=(WEB_W, WEB_H)),
        _chart_net_cost(d, figsize=(WEB_W, WEB_H - 2)),
    ]

    images = [figure_to_base64(f) for f in chart_figs]
    for f in chart_figs:
        plt.close(f)
    return images
