import pytest

import app as web
from simulation import default_config


@pytest.fixture
def client(tmp_path):
    web.app.config.update(TESTING=True, PDF_PATH=str(tmp_path / "report.pdf"))
    with web.app.test_client() as c:
        yield c
    web.app.config["PDF_PATH"] = web.cfg.PDF_PATH


def _post_data(**changes):
    data = {k: v for k, v in web.default_form().items() if v}
    data.update(changes)
    return data


# ── Form parsing ──────────────────────────────────────────────────────

def test_default_form_round_trips():
    assert web.parse_form(web.default_form()) == default_config()


def test_parse_form_blank_numbers_are_zero():
    form = web.default_form()
    form["gross_salary"] = ""
    form["private_scheme_start_balance"] = "  "
    inputs = web.parse_form(form)
    assert inputs.gross_salary == 0
    assert inputs.private_scheme_start_balance == 0


def test_parse_form_checkbox_and_currency():
    form = web.default_form()
    form.pop("use_phased_statutory_rate")
    form["gross_salary"] = "€75,500"
    form["private_tax_relief_rate"] = "0.2"
    inputs = web.parse_form(form)
    assert inputs.use_phased_statutory_rate is False
    assert inputs.gross_salary == 75_500
    assert inputs.private_tax_relief_rate == 0.2


def test_parse_form_rejects_text():
    form = web.default_form()
    form["fee_rate"] = "lots"
    with pytest.raises(ValueError, match="fee rate"):
        web.parse_form(form)


# ── Routes ────────────────────────────────────────────────────────────

def test_get_renders_default_projection(client, tmp_path):
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Projected Pot at Retirement" in html
    assert "data:image/png;base64," in html
    assert "Year-by-Year Projection" not in html
    assert (tmp_path / "report.pdf").exists()


def test_post_with_table(client):
    resp = client.post("/", data=_post_data(current_age="60", show_table="yes"))
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Year-by-Year Projection" in html
    assert html.count("<tr>") == 1 + 6


def test_post_zero_horizon(client):
    resp = client.post("/", data=_post_data(current_age="66"))
    assert resp.status_code == 200
    assert "already at or past" in resp.get_data(as_text=True)


def test_post_bad_input_keeps_entries(client):
    resp = client.post("/", data=_post_data(gross_salary="sixty grand"))
    assert resp.status_code == 400
    html = resp.get_data(as_text=True)
    assert "not a valid number" in html
    assert 'value="sixty grand"' in html


def test_download_pdf(client):
    assert client.get("/download-pdf").status_code == 404
    client.get("/")
    resp = client.get("/download-pdf")
    assert resp.status_code == 200
    assert resp.data.startswith(b"%PDF")


@pytest.mark.parametrize("value", ["inf", "1e400", "nan"])
def test_post_non_finite_age_is_rejected(client, value):
    resp = client.post("/", data=_post_data(current_age=value))
    assert resp.status_code == 400
    assert "not a valid number for current age" in resp.get_data(as_text=True)


def test_parse_form_rejects_overflowing_number():
    form = web.default_form()
    form["retirement_age"] = "1e400"
    with pytest.raises(ValueError, match="retirement age"):
        web.parse_form(form)
