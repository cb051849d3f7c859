"""
CLI interface and shared display-data computation for the
Auto-Enrolment vs Private Pension projector.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Dict, List

import numpy as np

import config as cfg
from simulation import SimulationConfig, SimulationResult, project
import report


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def fmt(val: float, decimals: int = 0) -> str:
    """Format number as €X,XXX (sign before the symbol)."""
    sign = "-" if val < 0 else ""
    return f"{sign}{cfg.CURRENCY_SYMBOL}{abs(val):,.{decimals}f}"


def pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


def rate_pct(rate: float, decimals: int = 1) -> str:
    """Format a fractional rate (0.015) as a percent string (1.5%)."""
    return pct(rate * 100, decimals)


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

def _strip_currency(s: str) -> str:
    """Remove currency symbols, commas, spaces."""
    return s.replace(cfg.CURRENCY_SYMBOL, "").replace(",", "").replace(" ", "")


def _prompt_float(
    label: str,
    default: Any,
    min_val: float | None = None,
    max_val: float | None = None,
    currency: bool = False,
) -> float:
    while True:
        raw = input(f"  {label} [{default}]: ").strip()
        if not raw:
            return float(_strip_currency(str(default))) if currency else float(default)
        try:
            val = float(_strip_currency(raw) if currency else raw.replace("%", ""))
            if not math.isfinite(val):
                raise ValueError(raw)
            if min_val is not None and val < min_val:
                print(f"    Must be at least {min_val}")
                continue
            if max_val is not None and val > max_val:
                print(f"    Must be at most {max_val}")
                continue
            return val
        except ValueError:
            print("    Invalid number, try again.")


def _prompt_int(
    label: str,
    default: int,
    min_val: int | None = None,
    max_val: int | None = None,
) -> int:
    while True:
        raw = input(f"  {label} [{default}]: ").strip()
        if not raw:
            return default
        try:
            val = int(float(_strip_currency(raw)))
            if min_val is not None and val < min_val:
                print(f"    Must be at least {min_val}")
                continue
            if max_val is not None and val > max_val:
                print(f"    Must be at most {max_val}")
                continue
            return val
        except (ValueError, OverflowError):
            print("    Invalid number, try again.")


def _prompt_choice(label: str, options: list[str], default: str) -> str:
    opts = "/".join(options)
    while True:
        raw = input(f"  {label} ({opts}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in options:
            return raw
        print(f"    Choose from: {opts}")


def collect_inputs() -> SimulationConfig:
    """Prompt the user for all projection parameters."""
    d = cfg.DEFAULT_INPUTS
    cur = cfg.CURRENCY_SYMBOL
    print("\n  Enter your details (press Enter for defaults):\n")

    age = _prompt_int("Current age", d["current_age"], 16, 80)
    retire = _prompt_int("Target retirement age", d["retirement_age"], 16, 100)
    salary = _prompt_float("Gross annual salary", f"{cur}{d['gross_salary']:,}", 0, currency=True)
    sal_growth = _prompt_float("Expected salary growth %/yr", d["salary_growth_rate"], -10, 20)
    ae_start = _prompt_float("Current pension pot - AE",
                             f"{cur}{d['statutory_scheme_start_balance']:,}", 0, currency=True)
    pp_start = _prompt_float("Current pension pot - Private",
                             f"{cur}{d['private_scheme_start_balance']:,}", 0, currency=True)
    growth = _prompt_float("Expected investment return %/yr", d["investment_growth_rate"], -20, 30)
    fees = _prompt_float("Annual fees/charges %/yr", d["fee_rate"], 0, 10)

    print("\n  Auto-enrolment settings:\n")
    phase_default = "yes" if d["use_phased_statutory_rate"] else "no"
    phased = _prompt_choice("Use statutory phase-in?", ["yes", "no"], phase_default) == "yes"
    ae_rate = d["statutory_fixed_employee_rate"]
    if not phased:
        ae_rate = _prompt_float("AE employee rate % (employer mirrors it)", ae_rate, 0, 100)

    print("\n  Private pension settings:\n")
    pp_emp = _prompt_float("Employee contribution %", d["private_employee_rate"], 0, 100)
    pp_er = _prompt_float("Employer contribution %", d["private_employer_rate"], 0, 100)
    relief_opts = [f"{r * 100:.0f}" for r in cfg.TAX_RELIEF_OPTIONS]
    relief = _prompt_choice("Income tax relief rate %", relief_opts,
                            f"{d['private_tax_relief_rate'] * 100:.0f}")

    return SimulationConfig(
        current_age=age,
        retirement_age=retire,
        gross_salary=salary,
        salary_growth_rate=sal_growth,
        investment_growth_rate=growth,
        fee_rate=fees,
        statutory_scheme_start_balance=ae_start,
        private_scheme_start_balance=pp_start,
        use_phased_statutory_rate=phased,
        statutory_fixed_employee_rate=ae_rate,
        private_employee_rate=pp_emp,
        private_employer_rate=pp_er,
        private_tax_relief_rate=float(relief) / 100,
    )


# ═══════════════════════════════════════════════════════════════════
# Shared display-data computation (used by CLI and web app)
# ═══════════════════════════════════════════════════════════════════

def compute_display_data(
    inputs: SimulationConfig,
    results: SimulationResult,
) -> Dict[str, Any]:
    """Extract every metric needed for the output sections."""
    T = inputs.horizon
    s = results.series()
    first = results.rows[0] if results.rows else None

    # ── Summary ─────────────────────────────────────────────────
    ae_pot = results.statutory_pot_balance
    pp_pot = results.private_pot_balance
    delta = results.pot_difference
    private_higher = delta >= 0
    delta_note = ("Private projects higher than AE." if private_higher
                  else "AE projects higher than Private.")

    # ── Lifetime totals ─────────────────────────────────────────
    ae_emp_total = float(np.sum(s["statutory_employee"]))
    ae_state_total = float(np.sum(s["statutory_state"]))
    ae_credited_total = float(np.sum(
        s["statutory_employee"] + s["statutory_employer"] + s["statutory_state"]))
    pp_emp_total = float(np.sum(s["private_employee"]))
    pp_credited_total = float(np.sum(s["private_employee"] + s["private_employer"]))
    pp_net_total = sum(r.private_net_employee_cost for r in results.rows)

    return {
        # Inputs echo
        "age": inputs.current_age,
        "retirement_age": inputs.retirement_age,
        "horizon": T,
        "salary": inputs.gross_salary,
        "phased": inputs.use_phased_statutory_rate,
        "net_growth_rate": inputs.net_growth_rate,
        "tax_relief": inputs.private_tax_relief_rate,
        # Summary
        "ae_pot": ae_pot,
        "pp_pot": pp_pot,
        "delta": delta,
        "delta_abs": abs(delta),
        "private_higher": private_higher,
        "delta_note": delta_note,
        # Year-one out-of-pocket
        "ae_net_cost_y1": first.statutory_net_employee_cost if first else 0.0,
        "pp_net_cost_y1": first.private_net_employee_cost if first else 0.0,
        "ae_rate_y1": first.statutory_employee_rate if first else 0.0,
        # Lifetime totals
        "ae_net_cost_total": ae_emp_total,
        "ae_state_total": ae_state_total,
        "ae_credited_total": ae_credited_total,
        "pp_gross_emp_total": pp_emp_total,
        "pp_net_cost_total": pp_net_total,
        "pp_credited_total": pp_credited_total,
    }


def generate_verdict_text(d: Dict[str, Any]) -> str:
    """Build a 2-3 sentence plain-English verdict."""
    T = d["horizon"]
    if T == 0:
        return (
            "You are already at or past your target retirement age, so no "
            "contributions or growth are projected. Both pots stay at "
            f"{fmt(d['ae_pot'])} (AE) and {fmt(d['pp_pot'])} (Private)."
        )

    net = rate_pct(d["net_growth_rate"])
    if d["private_higher"]:
        return (
            f"The private pension projects {fmt(d['delta_abs'])} more than "
            f"auto-enrolment after {T} years at a net {net} a year. "
            f"It costs you {fmt(d['pp_net_cost_total'])} out of pocket after "
            f"{rate_pct(d['tax_relief'], 0)} tax relief, against "
            f"{fmt(d['ae_net_cost_total'])} for auto-enrolment."
        )
    return (
        f"Auto-enrolment projects {fmt(d['delta_abs'])} more than the private "
        f"pension after {T} years at a net {net} a year. "
        f"The State top-up adds {fmt(d['ae_state_total'])} on top of your "
        f"{fmt(d['ae_net_cost_total'])} of contributions."
    )


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)


def _box_top(title: str) -> str:
    inner = W - 2
    bar = "═" * inner
    return (
        f"╔{bar}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{bar}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 38) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{'═' * (W - 2)}╝"


def _wrap(text: str, width: int) -> List[str]:
    lines: List[str] = []
    line = ""
    for word in text.split():
        if len(line) + len(word) + 1 <= width:
            line = f"{line} {word}" if line else word
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_inputs(inputs: SimulationConfig, d: Dict[str, Any]) -> None:
    if inputs.use_phased_statutory_rate:
        ae_rate = "Phased (1.5% → 6%)"
    else:
        ae_rate = pct(inputs.statutory_fixed_employee_rate)
    rows = [
        _box_row("Age / retirement age", f"{d['age']} / {d['retirement_age']}"),
        _box_row("Years to retirement", str(d["horizon"])),
        _box_row("Gross salary", fmt(d["salary"])),
        _box_row("Salary growth", pct(inputs.salary_growth_rate) + "/yr"),
        _box_row("Net growth (return - fees)", rate_pct(d["net_growth_rate"], 2) + "/yr"),
        _box_line(),
        _box_row("AE employee rate (employer mirrors)", ae_rate),
        _box_row("Private employee / employer", f"{pct(inputs.private_employee_rate)}"
                                                 f" / {pct(inputs.private_employer_rate)}"),
        _box_row("Private tax relief", rate_pct(inputs.private_tax_relief_rate, 0)),
    ]
    _print_section("YOUR INPUTS", rows)


def _print_summary(d: Dict[str, Any]) -> None:
    arrow = "▲" if d["private_higher"] else "▼"
    rows = [
        _box_row("Projected pot — Auto-Enrolment", fmt(d["ae_pot"])),
        _box_row("Projected pot — Private", fmt(d["pp_pot"])),
        _box_row("Difference (Private − AE)", f"{arrow} {fmt(d['delta_abs'])}"),
        _box_line(d["delta_note"]),
        _box_line(),
    ]
    rows.extend(_box_line(line) for line in _wrap(generate_verdict_text(d), W - 6))
    _print_section("SUMMARY", rows)


def _print_out_of_pocket(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("AE net employee cost (year 1)", fmt(d["ae_net_cost_y1"])),
        _box_line("  No tax relief; State adds ~33.33% inside the pot."),
        _box_row("Private net employee cost (year 1)", fmt(d["pp_net_cost_y1"])),
        _box_line("  Tax relief reduces take-home cost."),
        _box_line(),
        _box_row("AE total credited", fmt(d["ae_credited_total"])),
        _box_row("  of which State top-up", fmt(d["ae_state_total"])),
        _box_row("Private total credited", fmt(d["pp_credited_total"])),
    ]
    _print_section("ANNUAL OUT-OF-POCKET (EMPLOYEE)", rows)


def _print_table(results: SimulationResult) -> None:
    header = " ".join(f"{name:>{w}}" for name, w in report.TABLE_COLUMNS)
    print(header)
    print("─" * len(header))
    for cells in report.table_cells(results):
        print(" ".join(f"{c:>{w}}" for c, (_, w) in zip(cells, report.TABLE_COLUMNS)))
    print()


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli() -> None:
    """Run the full CLI workflow."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print(f"  {cfg.APP_TITLE}")
    print("  Illustrative calculator • Not financial advice")
    print("=" * W)

    inputs = collect_inputs()
    results = project(inputs)
    d = compute_display_data(inputs, results)

    print()
    _print_inputs(inputs, d)
    _print_summary(d)
    _print_out_of_pocket(d)

    if results.rows and _prompt_choice("Show year-by-year table?", ["yes", "no"], "no") == "yes":
        print()
        _print_table(results)

    print("\n  Generating PDF report...")
    pdf_path = report.generate_pdf(inputs, results, d, generate_verdict_text(d), cfg.PDF_PATH)
    print(f"  Saved to {pdf_path}\n")


if __name__ == "__main__":
    run_cli()
