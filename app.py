"""
Flask web application for the Auto-Enrolment vs Private Pension projector.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Any, Dict

from flask import Flask, render_template_string, request, send_file

import config as cfg
from simulation import SimulationConfig, project
from cli import (
    compute_display_data,
    generate_verdict_text,
    fmt,
    rate_pct,
)
import report

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["PDF_PATH"] = cfg.PDF_PATH

# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

NUMERIC_FIELDS = [
    "current_age", "retirement_age", "gross_salary", "salary_growth_rate",
    "statutory_scheme_start_balance", "private_scheme_start_balance",
    "investment_growth_rate", "fee_rate", "statutory_fixed_employee_rate",
    "private_employee_rate", "private_employer_rate", "private_tax_relief_rate",
]


def _parse_number(s: str | None) -> float:
    """Parse a form number; blank counts as zero."""
    s = (s or "").replace(cfg.CURRENCY_SYMBOL, "").replace(",", "").replace(" ", "")
    if not s:
        return 0.0
    val = float(s)
    if not math.isfinite(val):
        raise ValueError(f"non-finite number: {s}")
    return val


def _parse_int(s: str | None) -> int:
    return int(_parse_number(s))


def parse_form(form: dict) -> SimulationConfig:
    """Parse the HTML form into SimulationConfig.

    Raises ``ValueError`` when a numeric field is not a number.
    """
    fields: Dict[str, Any] = {}
    for name in NUMERIC_FIELDS:
        raw = form.get(name)
        try:
            if name in ("current_age", "retirement_age"):
                fields[name] = _parse_int(raw)
            else:
                fields[name] = _parse_number(raw)
        except (ValueError, OverflowError):
            raise ValueError(f"'{raw}' is not a valid number for {name.replace('_', ' ')}") from None
    fields["use_phased_statutory_rate"] = form.get("use_phased_statutory_rate") in ("on", "true", "1")
    return SimulationConfig(**fields)


def default_form() -> Dict[str, str]:
    """Default inputs as the strings the form fields hold."""
    form = {}
    for name, value in cfg.DEFAULT_INPUTS.items():
        if isinstance(value, bool):
            form[name] = "on" if value else ""
        else:
            form[name] = f"{value:g}"
    form["show_table"] = ""
    return form


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ title }}</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  :root{
    --bg-deep:#050914;
    --bg-surface:rgba(15,23,42,0.6);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(59,130,246,0.12);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --blue:#3b82f6;
    --blue-light:#93c5fd;
    --green:#22c55e;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }
  body{
    background:linear-gradient(180deg,#050914 0%,#0a1224 50%,#0b1427 100%);
    color:var(--text-primary);
    font-family:'Inter',system-ui,-apple-system,sans-serif;
    line-height:1.6;min-height:100vh;
  }
  .container{max-width:1240px;margin:0 auto;padding:2rem 1.5rem}

  /* ── header ── */
  .top{display:flex;flex-wrap:wrap;justify-content:space-between;align-items:center;gap:1rem;margin-bottom:1.5rem}
  .top h1{font-size:1.5rem;font-weight:800;letter-spacing:-.02em}
  .pill{
    font-size:.75rem;font-weight:500;background:#0a2540;border:1px solid #194569;
    color:#c6e1ff;padding:.3rem .9rem;border-radius:100px;
  }

  /* ── cards ── */
  .grid2{display:grid;grid-template-columns:1fr 1fr;gap:1.4rem}
  @media(max-width:960px){.grid2{grid-template-columns:1fr}}
  .card{
    background:var(--bg-surface);border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.6rem;margin-bottom:1.4rem;
  }
  h2{font-size:1.1rem;font-weight:700;margin-bottom:1rem}
  h3{font-size:1rem;font-weight:600;margin:1.2rem 0 .7rem}
  .divider{height:1px;background:#1f2937;margin:1.4rem 0}
  .note{font-size:.78rem;color:var(--blue-light);margin-top:.5rem}

  /* ── form ── */
  .form-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(220px,1fr));gap:.9rem 1.2rem}
  .form-group{display:flex;flex-direction:column}
  .form-group label{font-size:.78rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500}
  .form-group input,.form-group select{
    background:var(--bg-input);border:1px solid rgba(71,85,105,.35);border-radius:var(--radius-md);
    color:var(--text-primary);padding:.55rem .8rem;font-size:.88rem;font-family:inherit;
  }
  .form-group input:disabled{opacity:.45}
  .form-group .help{font-size:.72rem;color:var(--text-muted);margin-top:.25rem}
  .switch{display:flex;align-items:center;gap:.6rem;font-size:.88rem}
  .switch input{width:1.1rem;height:1.1rem;accent-color:var(--blue)}

  /* ── buttons ── */
  .actions{display:flex;flex-wrap:wrap;align-items:center;gap:1rem;margin-top:1.4rem}
  .btn{
    display:inline-flex;align-items:center;justify-content:center;
    padding:.65rem 1.6rem;border:none;border-radius:var(--radius-md);
    font-size:.92rem;font-weight:600;cursor:pointer;font-family:inherit;text-decoration:none;
  }
  .btn-primary{background:linear-gradient(90deg,#2563eb,#22c55e);color:#fff}
  .btn-ghost{background:#111f3a;border:1px solid #374151;color:#fff}
  .error{
    background:rgba(248,113,113,.08);border:1px solid rgba(248,113,113,.35);
    color:var(--red);border-radius:var(--radius-md);padding:.7rem 1rem;margin-bottom:1rem;font-size:.88rem;
  }

  /* ── KPIs ── */
  .kpis{display:grid;grid-template-columns:repeat(auto-fit,minmax(180px,1fr));gap:1rem}
  .kpi{background:rgba(17,24,39,.5);border:1px solid #1f2937;border-radius:12px;padding:1rem}
  .kpi-label{font-size:.8rem;color:rgba(191,219,254,.8)}
  .kpi-value{font-size:1.45rem;font-weight:700;margin-top:.2rem}
  .kpi-foot{font-size:.72rem;color:var(--text-secondary);margin-top:.5rem}
  .kpi-foot.up{color:var(--green)}
  .kpi-foot.down{color:var(--red)}
  .verdict{font-size:.88rem;color:var(--text-secondary);margin-top:1rem}

  /* ── charts & table ── */
  .chart-img{width:100%;border-radius:var(--radius-md);margin-top:1rem}
  .table-wrap{overflow-x:auto}
  table{width:100%;min-width:1000px;border-collapse:collapse;font-size:.82rem}
  th{color:#d1d5db;font-weight:600;text-align:right;padding:.5rem;border-bottom:1px solid #374151}
  td{text-align:right;padding:.45rem .5rem;border-bottom:1px solid #1f2937}
  th:first-child,td:first-child{text-align:left}
  td.ae-pot{color:#60a5fa;font-weight:600}
  td.pp-pot{color:#4ade80;font-weight:600}
  .footer{text-align:center;font-size:.72rem;color:var(--text-muted);margin-top:2rem}
</style>
</head>
<body>
<div class="container">

<header class="top">
  <h1>{{ title }}</h1>
  <span class="pill">Illustrative calculator &bull; Not financial advice</span>
</header>

<div class="grid2">

<!-- Inputs -->
<div class="card">
  <h2>Inputs</h2>
  {% if error %}<div class="error">{{ error }}</div>{% endif %}
  <form method="POST" id="sim-form">
    <div class="form-grid">
      <div class="form-group">
        <label>Current Age</label>
        <input type="number" name="current_age" value="{{ form.current_age }}">
      </div>
      <div class="form-group">
        <label>Target Retirement Age</label>
        <input type="number" name="retirement_age" value="{{ form.retirement_age }}">
      </div>
      <div class="form-group">
        <label>Gross Annual Salary (&euro;)</label>
        <input type="text" name="gross_salary" value="{{ form.gross_salary }}">
      </div>
      <div class="form-group">
        <label>Expected Salary Growth (%/yr)</label>
        <input type="number" step="0.1" name="salary_growth_rate" value="{{ form.salary_growth_rate }}">
      </div>
      <div class="form-group">
        <label>Current Pension Pot &ndash; AE (&euro;)</label>
        <input type="text" name="statutory_scheme_start_balance" value="{{ form.statutory_scheme_start_balance }}">
      </div>
      <div class="form-group">
        <label>Current Pension Pot &ndash; Private (&euro;)</label>
        <input type="text" name="private_scheme_start_balance" value="{{ form.private_scheme_start_balance }}">
      </div>
      <div class="form-group">
        <label>Expected Investment Return (%/yr)</label>
        <input type="number" step="0.1" name="investment_growth_rate" value="{{ form.investment_growth_rate }}">
      </div>
      <div class="form-group">
        <label>Annual Fees/Charges (%/yr)</label>
        <input type="number" step="0.05" name="fee_rate" value="{{ form.fee_rate }}">
        <span class="help">Applied to both scenarios.</span>
      </div>
    </div>

    <div class="divider"></div>
    <h3>Auto-Enrolment Settings</h3>
    <label class="switch">
      <input type="checkbox" name="use_phased_statutory_rate" id="phase-toggle" {{ 'checked' if form.use_phased_statutory_rate }}>
      Use statutory phase-in
    </label>
    <p class="note">Yrs 1-3: 1.5%, 4-6: 3%, 7-9: 4.5%, 10+: 6%</p>
    <div class="form-grid" style="margin-top:1rem">
      <div class="form-group">
        <label>AE Employee Rate (if not phased) %</label>
        <input type="number" step="0.1" name="statutory_fixed_employee_rate" id="ae-rate"
               value="{{ form.statutory_fixed_employee_rate }}" {{ 'readonly' if form.use_phased_statutory_rate }}>
      </div>
      <div class="form-group">
        <label>AE Employer Rate (mirrors employee) %</label>
        <input type="number" id="ae-er-rate" value="{{ form.statutory_fixed_employee_rate }}" disabled>
      </div>
    </div>
    <p class="note">State top-up = &euro;1 per &euro;3 employee contribution (&asymp;33.33%) is added automatically.</p>

    <div class="divider"></div>
    <h3>Private Pension Settings</h3>
    <div class="form-grid">
      <div class="form-group">
        <label>Employee Contribution %</label>
        <input type="number" step="0.1" name="private_employee_rate" value="{{ form.private_employee_rate }}">
      </div>
      <div class="form-group">
        <label>Employer Contribution %</label>
        <input type="number" step="0.1" name="private_employer_rate" value="{{ form.private_employer_rate }}">
      </div>
      <div class="form-group">
        <label>Income Tax Relief Rate</label>
        <select name="private_tax_relief_rate">
          {% for opt in relief_options %}
          <option value="{{ '%g'|format(opt) }}" {{ 'selected' if form.private_tax_relief_rate == '%g'|format(opt) }}>{{ '%.0f'|format(opt * 100) }}%</option>
          {% endfor %}
        </select>
      </div>
      <div class="form-group">
        <label>Show Year-by-Year Table</label>
        <select name="show_table">
          <option value="" {{ 'selected' if not form.show_table }}>No</option>
          <option value="yes" {{ 'selected' if form.show_table }}>Yes</option>
        </select>
      </div>
    </div>

    <div class="actions">
      <button type="submit" class="btn btn-primary">Calculate</button>
      <a href="/" class="btn btn-ghost">Reset</a>
      <p class="note" style="margin-top:0">AE pot is locked until State Pension Age; Private typically accessible earlier.</p>
    </div>
  </form>
</div>

<!-- Summary -->
<div>
{% if d %}
<div class="card">
  <h2>Summary</h2>
  <div class="kpis">
    <div class="kpi">
      <div class="kpi-label">Projected Pot at Retirement &mdash; Auto-Enrolment</div>
      <div class="kpi-value">{{ fmt(d.ae_pot) }}</div>
      <div class="kpi-foot">Includes employer match + State top-up</div>
    </div>
    <div class="kpi">
      <div class="kpi-label">Projected Pot at Retirement &mdash; Private</div>
      <div class="kpi-value">{{ fmt(d.pp_pot) }}</div>
      <div class="kpi-foot">Includes tax relief + employer contributions</div>
    </div>
    <div class="kpi">
      <div class="kpi-label">Difference (Private &minus; AE)</div>
      <div class="kpi-value">{{ '&#9650;'|safe if d.private_higher else '&#9660;'|safe }} {{ fmt(d.delta_abs) }}</div>
      <div class="kpi-foot {{ 'up' if d.private_higher else 'down' }}">{{ d.delta_note }}</div>
    </div>
  </div>
  <p class="verdict">{{ verdict_text }}</p>
  {% if charts %}
  <img class="chart-img" src="data:image/png;base64,{{ charts[0] }}" alt="Projected pot balance by year">
  {% endif %}
</div>

<div class="card">
  <h2>Annual Out-of-Pocket (Employee, Year 1)</h2>
  <div class="kpis">
    <div class="kpi">
      <div class="kpi-label">AE Net Employee Cost</div>
      <div class="kpi-value">{{ fmt(d.ae_net_cost_y1) }}</div>
      <div class="kpi-foot">Year-1 rate {{ rate_pct(d.ae_rate_y1) }}. No tax relief; State adds ~33.33% to your contribution inside the pot.</div>
    </div>
    <div class="kpi">
      <div class="kpi-label">Private Net Employee Cost</div>
      <div class="kpi-value">{{ fmt(d.pp_net_cost_y1) }}</div>
      <div class="kpi-foot">Tax relief reduces take-home cost.</div>
    </div>
  </div>
  {% if charts|length > 2 %}
  <img class="chart-img" src="data:image/png;base64,{{ charts[2] }}" alt="Year-one net employee cost">
  {% endif %}
</div>
{% endif %}
</div>

</div>

{% if d and charts|length > 1 %}
<div class="card">
  <h2>Contributions Credited Each Year</h2>
  <img class="chart-img" src="data:image/png;base64,{{ charts[1] }}" alt="Contributions credited each year">
</div>
{% endif %}

{% if d and form.show_table and rows %}
<div class="card">
  <h2>Year-by-Year Projection</h2>
  <p class="note" style="color:var(--text-secondary)">All amounts are approximate. Salary grows annually by the chosen rate.</p>
  <div class="table-wrap">
    <table>
      <thead>
        <tr>{% for h in table_header %}<th>{{ h }}</th>{% endfor %}</tr>
      </thead>
      <tbody>
        {% for cells in rows %}
        <tr>
          {% for c in cells %}
          <td class="{{ 'ae-pot' if loop.index0 == 6 else ('pp-pot' if loop.index0 == 10 else '') }}">{{ c }}</td>
          {% endfor %}
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </div>
</div>
{% endif %}

{% if d %}
<div class="actions" style="justify-content:center">
  <a href="/download-pdf" class="btn btn-primary">Download PDF Report</a>
</div>
{% endif %}

<div class="footer">
  Disclaimer: For education/illustration only. It does not account for Revenue limits,
  provider-specific charges, PRSI/USC, or future rule changes. Seek regulated financial
  advice before making decisions.
</div>
</div>

<script>
/* Employer rate mirrors the employee rate; fixed rate only editable when not phased */
(function(){
  var toggle=document.getElementById('phase-toggle');
  var rate=document.getElementById('ae-rate');
  var er=document.getElementById('ae-er-rate');
  if(!toggle||!rate||!er) return;
  toggle.addEventListener('change',function(){ rate.readOnly=toggle.checked; });
  rate.addEventListener('input',function(){ er.value=rate.value; });
})();
</script>
</body>
</html>
"""


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

def _render(form: Dict[str, str], inputs: SimulationConfig | None, error: str = ""):
    d = None
    charts = []
    rows = []
    verdict_text = ""
    if inputs is not None:
        results = project(inputs)
        d = compute_display_data(inputs, results)
        verdict_text = generate_verdict_text(d)
        charts = report.get_web_charts(results, d)
        rows = report.table_cells(results)
        report.generate_pdf(inputs, results, d, verdict_text, app.config["PDF_PATH"])

    return render_template_string(
        HTML_TEMPLATE,
        title=cfg.APP_TITLE,
        form=form,
        d=d,
        charts=charts,
        rows=rows,
        table_header=report.TABLE_HEADER,
        relief_options=cfg.TAX_RELIEF_OPTIONS,
        verdict_text=verdict_text,
        error=error,
        fmt=fmt,
        rate_pct=rate_pct,
    )


@app.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        # Fresh page (and Reset) shows the projection for the defaults
        form = default_form()
        return _render(form, parse_form(form))

    # POST: run projection
    form = request.form.to_dict()
    try:
        inputs = parse_form(form)
    except ValueError as exc:
        logger.warning("Rejected form input: %s", exc)
        return _render(form, None, error=str(exc)), 400
    return _render(form, inputs)


@app.route("/download-pdf")
def download_pdf():
    path = app.config["PDF_PATH"]
    if os.path.exists(path):
        return send_file(os.path.abspath(path), as_attachment=True,
                         download_name=os.path.basename(cfg.PDF_PATH))
    return "No report generated yet. Run a projection first.", 404


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(debug: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    print("Starting web app at http://localhost:5000")
    threading.Timer(1.0, lambda: webbrowser.open("http://localhost:5000")).start()
    app.run(host="127.0.0.1", port=5000, debug=debug)


if __name__ == "__main__":
    run_web()
