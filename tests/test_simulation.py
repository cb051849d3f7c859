import pytest

import config as cfg
from simulation import (
    SimulationConfig,
    compare_scenarios,
    default_config,
    project,
    statutory_employee_rate_for_year,
    with_overrides,
)


@pytest.fixture
def base():
    """Defaults with flat salary, the standard worked example."""
    return with_overrides(default_config(), salary_growth_rate=0.0)


# ── Worked example ────────────────────────────────────────────────────

def test_year_one_statutory_figures(base):
    first = project(base).rows[0]
    assert first.statutory_employee_rate == 0.015
    assert first.statutory_employee_contribution == pytest.approx(900)
    assert first.statutory_state_top_up == pytest.approx(300)
    assert first.statutory_employer_contribution == pytest.approx(900)
    assert first.statutory_total_credited == pytest.approx(2100)
    assert first.statutory_pot_balance == pytest.approx(2188.20)


def test_year_one_private_figures(base):
    first = project(base).rows[0]
    assert first.private_employee_contribution == pytest.approx(6000)
    assert first.private_employer_contribution == pytest.approx(3600)
    assert first.private_total_credited == pytest.approx(9600)
    assert first.private_net_employee_cost == pytest.approx(3600)
    assert first.private_pot_balance == pytest.approx(10003.20)


def test_rows_cover_horizon_in_order(base):
    res = project(base)
    assert base.horizon == 36
    assert len(res.rows) == 36
    assert [r.year for r in res.rows] == list(range(1, 37))
    assert res.statutory_pot_balance == res.rows[-1].statutory_pot_balance
    assert res.private_pot_balance == res.rows[-1].private_pot_balance


# ── Horizon ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("age,retire", [(66, 66), (70, 66)])
def test_zero_horizon_returns_start_pots(base, age, retire):
    inputs = with_overrides(
        base, current_age=age, retirement_age=retire,
        statutory_scheme_start_balance=12_345.67,
        private_scheme_start_balance=8_000.5,
    )
    res = project(inputs)
    assert inputs.horizon == 0
    assert res.rows == ()
    assert res.statutory_pot_balance == 12_345.67
    assert res.private_pot_balance == 8_000.5


def test_horizon_capped_at_sixty(base):
    inputs = with_overrides(base, current_age=18, retirement_age=100)
    assert inputs.horizon == cfg.MAX_HORIZON_YEARS
    assert len(project(inputs).rows) == 60


# ── Rate schedule ─────────────────────────────────────────────────────

@pytest.mark.parametrize("year,expected", [
    (1, 0.015), (3, 0.015), (4, 0.03), (6, 0.03),
    (7, 0.045), (9, 0.045), (10, 0.06), (40, 0.06),
])
def test_phased_rate_bands(year, expected):
    assert statutory_employee_rate_for_year(year, True, 2.0) == expected


def test_fixed_rate_used_when_not_phased():
    assert statutory_employee_rate_for_year(1, False, 4.5) == pytest.approx(0.045)
    assert statutory_employee_rate_for_year(25, False, 4.5) == pytest.approx(0.045)


def test_phased_ignores_configured_fixed_rate(base):
    res = project(with_overrides(base, statutory_fixed_employee_rate=12.0))
    assert [r.statutory_employee_rate for r in res.rows[:10]] == [
        0.015, 0.015, 0.015, 0.03, 0.03, 0.03, 0.045, 0.045, 0.045, 0.06]


@pytest.mark.parametrize("phased", [True, False])
def test_employer_mirrors_employee_and_state_is_one_third(base, phased):
    res = project(with_overrides(base, use_phased_statutory_rate=phased,
                                 salary_growth_rate=3.0))
    for r in res.rows:
        assert r.statutory_employer_rate == r.statutory_employee_rate
        assert r.statutory_employer_contribution == r.statutory_employee_contribution
        assert r.statutory_state_top_up == r.statutory_employee_contribution / 3
        assert r.statutory_net_employee_cost == r.statutory_employee_contribution


# ── Private pension ───────────────────────────────────────────────────

def test_no_tax_relief_means_net_equals_gross(base):
    res = project(with_overrides(base, private_tax_relief_rate=0.0))
    for r in res.rows:
        assert r.private_net_employee_cost == r.private_employee_contribution


def test_twenty_percent_relief(base):
    first = project(with_overrides(base, private_tax_relief_rate=0.20)).rows[0]
    assert first.private_net_employee_cost == pytest.approx(4800)


# ── Compounding and salary growth ─────────────────────────────────────

def test_pot_recurrence_from_start_balance(base):
    inputs = with_overrides(base, statutory_scheme_start_balance=5_000,
                            private_scheme_start_balance=20_000,
                            salary_growth_rate=2.5)
    res = project(inputs)
    growth = 1 + inputs.net_growth_rate
    ae_prev, pp_prev = 5_000, 20_000
    for r in res.rows:
        assert r.statutory_pot_balance == pytest.approx(
            (ae_prev + r.statutory_total_credited) * growth)
        assert r.private_pot_balance == pytest.approx(
            (pp_prev + r.private_total_credited) * growth)
        ae_prev, pp_prev = r.statutory_pot_balance, r.private_pot_balance


def test_salary_grows_after_each_year(base):
    res = project(with_overrides(base, salary_growth_rate=3.0))
    for r in res.rows:
        assert r.salary_this_year == pytest.approx(60_000 * 1.03 ** (r.year - 1))


def test_fees_above_growth_give_negative_rate(base):
    inputs = with_overrides(base, investment_growth_rate=2.0, fee_rate=5.0,
                            statutory_scheme_start_balance=1_000_000)
    assert inputs.net_growth_rate == pytest.approx(-0.03)
    res = project(inputs)
    first = res.rows[0]
    assert first.statutory_pot_balance == pytest.approx(
        (1_000_000 + first.statutory_total_credited) * 0.97)
    # Small contributions cannot offset the drag on a large pot
    assert res.rows[1].statutory_pot_balance < first.statutory_pot_balance


def test_project_is_deterministic(base):
    assert project(base) == project(base)


# ── Scenario helpers ──────────────────────────────────────────────────

def test_default_config_matches_defaults():
    inputs = default_config()
    assert isinstance(inputs, SimulationConfig)
    assert inputs.gross_salary == cfg.DEFAULT_INPUTS["gross_salary"]
    assert inputs.private_tax_relief_rate == 0.40


def test_with_overrides_leaves_original_untouched(base):
    changed = with_overrides(base, fee_rate=1.5)
    assert changed.fee_rate == 1.5
    assert base.fee_rate == 0.8


def test_with_overrides_rejects_unknown_field(base):
    with pytest.raises(TypeError, match="not_a_field"):
        with_overrides(base, not_a_field=1)


def test_compare_scenarios(base):
    variants = [
        ("baseline", {}),
        ("high fees", {"fee_rate": 1.5}),
        ("fixed 6%", {"use_phased_statutory_rate": False}),
    ]
    out = compare_scenarios(base, variants)
    assert list(out) == ["baseline", "high fees", "fixed 6%"]
    assert out["baseline"] == project(base)
    assert out["high fees"] == project(with_overrides(base, fee_rate=1.5))
    assert out["high fees"].statutory_pot_balance < out["baseline"].statutory_pot_balance
    assert out["fixed 6%"].rows[0].statutory_employee_rate == pytest.approx(0.06)


def test_series_arrays_line_up(base):
    s = project(base).series()
    assert s["years"].tolist() == list(range(1, 37))
    assert len(s["statutory_pot"]) == len(s["private_pot"]) == 36
    assert s["statutory_pot"][0] == pytest.approx(2188.20)


def test_fixed_rate_applies_every_year(base):
    inputs = with_overrides(base, use_phased_statutory_rate=False,
                            statutory_fixed_employee_rate=4.0)
    res = project(inputs)
    assert len(res.rows) == 36
    for r in res.rows:
        assert r.statutory_employee_rate == 4.0 / 100
        assert r.statutory_employer_rate == 4.0 / 100
