import pytest

import cli
from cli import compute_display_data, fmt, generate_verdict_text, pct, rate_pct
from simulation import default_config, project, with_overrides


def _display(**overrides):
    inputs = with_overrides(default_config(), **overrides)
    return compute_display_data(inputs, project(inputs))


# ── Formatting ────────────────────────────────────────────────────────

def test_fmt():
    assert fmt(1234) == "€1,234"
    assert fmt(1234.5678, 2) == "€1,234.57"
    assert fmt(-5000) == "-€5,000"
    assert fmt(0) == "€0"


def test_pct():
    assert pct(1.5) == "1.5%"
    assert pct(40, 0) == "40%"
    assert rate_pct(0.015) == "1.5%"


# ── Display data ──────────────────────────────────────────────────────

def test_display_data_difference_and_winner():
    d = _display()
    assert d["delta"] == pytest.approx(d["pp_pot"] - d["ae_pot"])
    assert d["delta_abs"] == pytest.approx(abs(d["delta"]))
    # 16% of salary into the private pot beats 3-12% in AE at default settings
    assert d["private_higher"] is True
    assert d["delta_note"] == "Private projects higher than AE."


def test_display_data_ae_higher():
    d = _display(private_employee_rate=1.0, private_employer_rate=0.0)
    assert d["private_higher"] is False
    assert d["delta_note"] == "AE projects higher than Private."


def test_display_data_year_one_costs():
    d = _display(salary_growth_rate=0.0)
    assert d["ae_net_cost_y1"] == pytest.approx(900)
    assert d["pp_net_cost_y1"] == pytest.approx(3600)
    assert d["ae_rate_y1"] == 0.015
    assert d["horizon"] == 36


def test_display_data_totals():
    inputs = with_overrides(default_config(), current_age=60)
    res = project(inputs)
    d = compute_display_data(inputs, res)
    assert d["ae_state_total"] == pytest.approx(
        sum(r.statutory_state_top_up for r in res.rows))
    assert d["ae_credited_total"] == pytest.approx(
        sum(r.statutory_total_credited for r in res.rows))
    assert d["pp_net_cost_total"] == pytest.approx(
        sum(r.private_net_employee_cost for r in res.rows))
    assert d["pp_credited_total"] == pytest.approx(
        sum(r.private_total_credited for r in res.rows))


def test_display_data_zero_horizon():
    d = _display(current_age=66, statutory_scheme_start_balance=1000)
    assert d["horizon"] == 0
    assert d["ae_pot"] == 1000
    assert d["ae_net_cost_y1"] == 0.0
    assert d["pp_net_cost_y1"] == 0.0
    assert d["ae_credited_total"] == 0.0


# ── Verdict ───────────────────────────────────────────────────────────

def test_verdict_private_higher():
    text = generate_verdict_text(_display())
    assert text.startswith("The private pension projects")
    assert "36 years" in text


def test_verdict_ae_higher():
    text = generate_verdict_text(_display(private_employee_rate=1.0,
                                          private_employer_rate=0.0))
    assert text.startswith("Auto-enrolment projects")
    assert "State top-up" in text


def test_verdict_zero_horizon():
    text = generate_verdict_text(_display(current_age=70))
    assert "already at or past" in text


# ── Prompts ───────────────────────────────────────────────────────────

def _feed(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))


def test_collect_inputs_all_defaults(monkeypatch):
    _feed(monkeypatch, [""] * 12)
    assert cli.collect_inputs() == default_config()


def test_collect_inputs_fixed_rate(monkeypatch, capsys):
    _feed(monkeypatch, [
        "40", "65", "€45,000", "2", "10,000", "", "6", "1",
        "no", "abc", "5",       # bad rate is re-asked
        "8", "4", "20",
    ])
    inputs = cli.collect_inputs()
    assert inputs.current_age == 40
    assert inputs.retirement_age == 65
    assert inputs.gross_salary == 45_000
    assert inputs.statutory_scheme_start_balance == 10_000
    assert inputs.private_scheme_start_balance == 0
    assert inputs.use_phased_statutory_rate is False
    assert inputs.statutory_fixed_employee_rate == 5
    assert inputs.private_tax_relief_rate == pytest.approx(0.20)
    assert "Invalid number" in capsys.readouterr().out


def test_prompt_int_range_is_enforced(monkeypatch, capsys):
    _feed(monkeypatch, ["5", "30"])
    assert cli._prompt_int("Age", 30, 16, 80) == 30
    assert "Must be at least 16" in capsys.readouterr().out


def test_print_table_has_one_line_per_year(capsys):
    inputs = with_overrides(default_config(), current_age=63)
    cli._print_table(project(inputs))
    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.strip()]
    assert len(lines) == 2 + 3
    assert "AE Pot" in lines[0]


def test_prompt_int_reasks_on_overflow(monkeypatch, capsys):
    _feed(monkeypatch, ["inf", "1e400", "45"])
    assert cli._prompt_int("Age", 30, 16, 80) == 45
    assert capsys.readouterr().out.count("Invalid number") == 2


def test_prompt_float_reasks_on_non_finite(monkeypatch, capsys):
    _feed(monkeypatch, ["inf", "nan", "€52,000"])
    assert cli._prompt_float("Salary", "€60,000", 0, currency=True) == 52_000
    assert capsys.readouterr().out.count("Invalid number") == 2
