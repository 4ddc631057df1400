import io
import json
import logging
import os

from flask import Flask, Response, jsonify, render_template, request

from loan_calc.data_models import FREQUENCY_CHOICES
from loan_calc.engine import compute_schedule, summarize_schedule
from loan_calc.exceptions import ValidationError
from loan_calc.export import chart_series, schedule_rows, serialize_schedule, write_csv, write_pdf, SCHEDULE_HEADER
from loan_calc.validation import validate_parameters

logger = logging.getLogger(__name__)

FORM_FIELDS = ("principal", "rate", "tenure", "frequency", "moratorium", "start_date")

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["MAX_ROWS"] = int(os.environ.get("LOAN_CALC_MAX_ROWS", "120"))
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")


def _form_values(form) -> dict:
    values = {field: form.get(field, "").strip() for field in FORM_FIELDS}
    values["frequency"] = values["frequency"] or "monthly"
    values["moratorium"] = values["moratorium"] or "0"
    return values


def _run_analysis(values: dict):
    """Validate and compute. Raises ``ValidationError`` for bad input."""
    params = validate_parameters(values)
    schedule = compute_schedule(params)
    return schedule, summarize_schedule(params, schedule)


def _rows_for_view(summary: dict, schedule: list):
    max_rows = app.config["MAX_ROWS"]
    preview = schedule[:max_rows]
    if len(schedule) > max_rows:
        summary["truncated"] = len(schedule) - len(preview)
    return [[str(p.number)] + row for p, row in zip(preview, schedule_rows(preview))]


@app.route("/", methods=["GET", "POST"])
def index():
    values = _form_values(request.form)
    errors = {}
    error = None
    summary = None
    rows = []
    chart_payload = "null"

    # Every submission recomputes the whole schedule; nothing is kept
    # between requests.
    if request.method == "POST":
        try:
            schedule, summary = _run_analysis(values)
            rows = _rows_for_view(summary, schedule)
            chart_payload = json.dumps(chart_series(schedule))
        except ValidationError as exc:
            errors = exc.errors
        except Exception as exc:
            logger.exception("Schedule computation failed for %s", values)
            error = str(exc)

    return render_template(
        "index.html",
        values=values,
        errors=errors,
        error=error,
        summary=summary,
        header=["Period"] + SCHEDULE_HEADER,
        rows=rows,
        chart_payload=chart_payload,
        frequency_choices=FREQUENCY_CHOICES,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.post("/export/csv")
def export_csv():
    try:
        schedule, _ = _run_analysis(_form_values(request.form))
    except ValidationError as exc:
        return jsonify({"errors": exc.errors}), 400
    buffer = io.StringIO()
    write_csv(buffer, schedule)
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=loan-schedule.csv"},
    )


@app.post("/export/pdf")
def export_pdf():
    try:
        schedule, _ = _run_analysis(_form_values(request.form))
    except ValidationError as exc:
        return jsonify({"errors": exc.errors}), 400
    buffer = io.BytesIO()
    write_pdf(buffer, schedule)
    return Response(
        buffer.getvalue(),
        mimetype="application/pdf",
        headers={"Content-Disposition": "attachment; filename=loan-schedule.pdf"},
    )


@app.post("/export/json")
def export_json():
    try:
        schedule, summary = _run_analysis(_form_values(request.form))
    except ValidationError as exc:
        return jsonify({"errors": exc.errors}), 400
    payload = json.dumps({"summary": summary, "schedule": serialize_schedule(schedule)}, indent=2)
    return Response(
        payload,
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=loan-schedule.json"},
    )


@app.post("/api/schedule")
def api_schedule():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        values = _form_values(request.form)
    else:
        values = {field: data.get(field) for field in FORM_FIELDS}
    try:
        schedule, summary = _run_analysis(values)
    except ValidationError as exc:
        return jsonify({"errors": exc.errors}), 400
    return jsonify(
        {
            "summary": summary,
            "schedule": serialize_schedule(schedule),
            "chart": chart_series(schedule),
        }
    )


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOAN_CALC_LOG_LEVEL", "INFO").upper())
    logger.info("Starting Loan Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
