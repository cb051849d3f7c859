"""
Projection engine for the Auto-Enrolment vs Private Pension comparison.

Projects two pension pots side by side over the years to retirement:
  A) Auto-enrolment: phased (or fixed) employee rate, employer mirrors it,
     State adds €1 for every €3 the employee pays
  B) Private pension: fixed employee/employer rates, tax relief lowers the
     employee's net cost

Both pots compound once a year at the same net rate (growth minus fees).
The horizon is at most 60 steps, so the year loop is a plain Python loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Iterable

import numpy as np

import config as cfg

logger = logging.getLogger(__name__)


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SimulationConfig:
    """User inputs for one projection run."""

    current_age: int
    retirement_age: int
    gross_salary: float                     # year-1 annual gross salary
    salary_growth_rate: float               # %/yr, e.g. 3 means 3%
    investment_growth_rate: float           # %/yr before fees
    fee_rate: float                         # %/yr, charged on both pots
    statutory_scheme_start_balance: float   # AE pot today
    private_scheme_start_balance: float     # private pot today
    use_phased_statutory_rate: bool         # True = follow the phase-in bands
    statutory_fixed_employee_rate: float    # %, used only when not phased
    private_employee_rate: float            # %
    private_employer_rate: float            # %
    private_tax_relief_rate: float          # fraction, e.g. 0.40

    @property
    def horizon(self) -> int:
        """Years to simulate, clamped to [0, MAX_HORIZON_YEARS]."""
        years = self.retirement_age - self.current_age
        return int(min(max(years, 0), cfg.MAX_HORIZON_YEARS))

    @property
    def net_growth_rate(self) -> float:
        # May be negative when fees exceed growth
        return (self.investment_growth_rate - self.fee_rate) / 100


@dataclass(frozen=True)
class YearlyRecord:
    """One simulated year. Rates are fractions, amounts are EUR."""

    year: int
    salary_this_year: float

    # ── Auto-enrolment ──
    statutory_employee_rate: float
    statutory_employer_rate: float
    statutory_employee_contribution: float
    statutory_employer_contribution: float
    statutory_state_top_up: float
    statutory_total_credited: float
    statutory_net_employee_cost: float

    # ── Private pension ──
    private_employee_rate: float
    private_employer_rate: float
    private_employee_contribution: float
    private_employer_contribution: float
    private_total_credited: float
    private_net_employee_cost: float

    # ── End-of-year balances ──
    statutory_pot_balance: float
    private_pot_balance: float


@dataclass(frozen=True)
class SimulationResult:
    """Output of :func:`project`."""

    rows: tuple[YearlyRecord, ...]
    statutory_pot_balance: float    # final AE pot (start balance if no years)
    private_pot_balance: float      # final private pot

    @property
    def pot_difference(self) -> float:
        """Private minus auto-enrolment at retirement."""
        return self.private_pot_balance - self.statutory_pot_balance

    def series(self) -> dict[str, np.ndarray]:
        """Per-year arrays for charting, keyed by column name."""
        return {
            "years": np.array([r.year for r in self.rows], dtype=int),
            "salary": np.array([r.salary_this_year for r in self.rows], dtype=float),
            "statutory_pot": np.array([r.statutory_pot_balance for r in self.rows], dtype=float),
            "private_pot": np.array([r.private_pot_balance for r in self.rows], dtype=float),
            "statutory_employee": np.array(
                [r.statutory_employee_contribution for r in self.rows], dtype=float),
            "statutory_employer": np.array(
                [r.statutory_employer_contribution for r in self.rows], dtype=float),
            "statutory_state": np.array([r.statutory_state_top_up for r in self.rows], dtype=float),
            "private_employee": np.array(
                [r.private_employee_contribution for r in self.rows], dtype=float),
            "private_employer": np.array(
                [r.private_employer_contribution for r in self.rows], dtype=float),
        }


# ─── Rate Schedule ────────────────────────────────────────────────────

def statutory_employee_rate_for_year(
    year: int,
    use_phased_rate: bool,
    fixed_rate_pct: float,
) -> float:
    """Return the AE employee rate (fraction) for simulation year *year*.

    Parameters
    ----------
    year : int
        1-based simulation year (not age, not calendar year).
    use_phased_rate : bool
        Follow ``AE_PHASE_IN_BANDS`` when True.
    fixed_rate_pct : float
        Whole-number percent used for every year when phasing is off.
    """
    if not use_phased_rate:
        return fixed_rate_pct / 100
    for last_year, rate in cfg.AE_PHASE_IN_BANDS:
        if year <= last_year:
            return rate
    return cfg.AE_PHASE_IN_BANDS[-1][1]


# ─── Core Projection ──────────────────────────────────────────────────

def project(config: SimulationConfig) -> SimulationResult:
    """Project both pension pots year by year until retirement."""

    T = config.horizon
    statutory_pot = config.statutory_scheme_start_balance
    private_pot = config.private_scheme_start_balance

    if T == 0:
        logger.debug("Zero horizon (age %s, retire %s); returning start pots",
                     config.current_age, config.retirement_age)
        return SimulationResult(
            rows=(),
            statutory_pot_balance=statutory_pot,
            private_pot_balance=private_pot,
        )

    growth = 1 + config.net_growth_rate
    salary_growth = 1 + config.salary_growth_rate / 100
    pp_rate_emp = config.private_employee_rate / 100
    pp_rate_er = config.private_employer_rate / 100

    salary = config.gross_salary
    rows: list[YearlyRecord] = []

    # ── Year loop ─────────────────────────────────────────────────
    for y in range(1, T + 1):
        # ──── Auto-enrolment ──────────────────────────────────────
        ae_rate_emp = statutory_employee_rate_for_year(
            y, config.use_phased_statutory_rate, config.statutory_fixed_employee_rate)
        ae_rate_er = ae_rate_emp
        ae_emp = salary * ae_rate_emp
        ae_er = salary * ae_rate_er
        ae_state = ae_emp / cfg.STATE_TOP_UP_DIVISOR
        ae_credited = ae_emp + ae_er + ae_state
        ae_net_cost = ae_emp  # paid from taxed income, no relief

        # ──── Private pension ─────────────────────────────────────
        pp_emp = salary * pp_rate_emp
        pp_er = salary * pp_rate_er
        pp_credited = pp_emp + pp_er
        pp_net_cost = pp_emp * (1 - config.private_tax_relief_rate)

        # Contributions land before the year's growth
        statutory_pot = (statutory_pot + ae_credited) * growth
        private_pot = (private_pot + pp_credited) * growth

        rows.append(YearlyRecord(
            year=y,
            salary_this_year=salary,
            statutory_employee_rate=ae_rate_emp,
            statutory_employer_rate=ae_rate_er,
            statutory_employee_contribution=ae_emp,
            statutory_employer_contribution=ae_er,
            statutory_state_top_up=ae_state,
            statutory_total_credited=ae_credited,
            statutory_net_employee_cost=ae_net_cost,
            private_employee_rate=pp_rate_emp,
            private_employer_rate=pp_rate_er,
            private_employee_contribution=pp_emp,
            private_employer_contribution=pp_er,
            private_total_credited=pp_credited,
            private_net_employee_cost=pp_net_cost,
            statutory_pot_balance=statutory_pot,
            private_pot_balance=private_pot,
        ))

        # Pay rise takes effect next year
        salary *= salary_growth

    logger.debug("Projected %d years: AE pot %.2f, private pot %.2f",
                 T, statutory_pot, private_pot)

    return SimulationResult(
        rows=tuple(rows),
        statutory_pot_balance=statutory_pot,
        private_pot_balance=private_pot,
    )


# ─── Scenario Helpers ─────────────────────────────────────────────────

def default_config() -> SimulationConfig:
    """Build a config from ``DEFAULT_INPUTS``."""
    return SimulationConfig(**cfg.DEFAULT_INPUTS)


def with_overrides(config: SimulationConfig, **overrides) -> SimulationConfig:
    """Copy *config* with the given fields replaced.

    Raises ``TypeError`` for names that are not config fields.
    """
    known = {f.name for f in fields(SimulationConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
    return replace(config, **overrides)


def compare_scenarios(
    config: SimulationConfig,
    variants: Iterable[tuple[str, dict]],
) -> dict[str, SimulationResult]:
    """Project each named variant of *config*.

    variants: iterable of (name, overrides-dict)
    returns: dict name -> SimulationResult
    """
    results: dict[str, SimulationResult] = {}
    for name, edits in variants:
        results[name] = project(with_overrides(config, **edits))
    return results


# ─── Smoke Test ───────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 60)
    print("Pension Projection — Smoke Test")
    print("=" * 60)

    inputs = with_overrides(default_config(), salary_growth_rate=0.0)
    res = project(inputs)
    first = res.rows[0]

    print(f"\nHorizon: {inputs.horizon} years")
    print(f"  Year 1 AE credited:       €{first.statutory_total_credited:,.2f}")
    print(f"  Year 1 AE pot:            €{first.statutory_pot_balance:,.2f}")
    print(f"  Year 1 private credited:  €{first.private_total_credited:,.2f}")
    print(f"  Year 1 private pot:       €{first.private_pot_balance:,.2f}")
    print(f"\n  Final AE pot:             €{res.statutory_pot_balance:,.0f}")
    print(f"  Final private pot:        €{res.private_pot_balance:,.0f}")
    print(f"  Difference (PP - AE):     €{res.pot_difference:,.0f}")
