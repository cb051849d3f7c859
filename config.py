"""
Constants for the Auto-Enrolment vs Private Pension projector (Ireland).

All monetary values in EUR. Rates stored the way the engine consumes
them: schedule rates as fractions, user inputs as whole-number percent
unless stated otherwise.
"""

# ── Projection horizon ───────────────────────────────────────────────
MAX_HORIZON_YEARS = 60       # years simulated at most, whatever the ages

# ── Auto-enrolment (statutory) scheme ────────────────────────────────
# Phase-in bands: (last simulation year in band, employee rate).
# Last band has no upper limit (use inf). Employer mirrors the employee.
AE_PHASE_IN_BANDS = [
    (3, 0.015),
    (6, 0.030),
    (9, 0.045),
    (float("inf"), 0.060),
]

STATE_TOP_UP_DIVISOR = 3     # €1 from the State per €3 from the employee

# ── Private pension scheme ───────────────────────────────────────────
TAX_RELIEF_OPTIONS = (0.20, 0.40)   # standard / higher income tax rate

# ── Display ──────────────────────────────────────────────────────────
APP_TITLE = "Auto-Enrolment vs Private Pension — Ireland"
CURRENCY_SYMBOL = "€"
PDF_PATH = "pension_projection_report.pdf"

# ── Default inputs ───────────────────────────────────────────────────
DEFAULT_INPUTS = {
    "current_age": 30,
    "retirement_age": 66,
    "gross_salary": 60_000,
    "salary_growth_rate": 3.0,           # %/yr
    "statutory_scheme_start_balance": 0,
    "private_scheme_start_balance": 0,
    "investment_growth_rate": 5.0,       # %/yr, before fees
    "fee_rate": 0.8,                     # %/yr, both schemes
    "use_phased_statutory_rate": True,
    "statutory_fixed_employee_rate": 6.0,  # %, only when not phased
    "private_employee_rate": 10.0,       # %
    "private_employer_rate": 6.0,        # %
    "private_tax_relief_rate": 0.40,     # fraction
}
