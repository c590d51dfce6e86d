import logging
import os
from collections.abc import Mapping

from flask import Flask, jsonify, request

from amort_calc.engine import build_schedule, summarize
from amort_calc.main import row_to_dict
from amort_calc.data_models import Cadence, LoanRequest
from amort_calc.utils import decimal_from_str, parse_start_date, validate_request

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["PREVIEW_ROWS"] = int(os.environ.get("AMORT_PREVIEW_ROWS", "120"))


def _form_to_request(form) -> LoanRequest:
    """Build a validated ``LoanRequest`` from submitted form or JSON fields.

    Raises ``ValueError`` with a message suitable for showing to the user.
    """
    principal = str(form.get("principal", "")).strip()
    rate = str(form.get("rate", "")).strip()
    term = str(form.get("term", "")).strip()
    if not principal or not rate or not term:
        raise ValueError("Please enter valid positive values for amount, APR, and term.")
    try:
        term_years = int(term)
    except ValueError as exc:
        raise ValueError(f"Invalid term: {term}") from exc

    extra = str(form.get("extra", "") or "").strip() or "0"
    start_date = str(form.get("start_date", "") or "").strip()
    cadence = str(form.get("cadence", "") or Cadence.MONTHLY.value).lower()

    loan = LoanRequest(
        principal=decimal_from_str(principal),
        annual_rate=decimal_from_str(rate),
        term_years=term_years,
        extra_payment=decimal_from_str(extra),
        start_date=parse_start_date(start_date) if start_date else None,
        cadence=Cadence(cadence),
    )
    validate_request(loan)
    return loan


def _is_truthy(value) -> bool:
    return str(value).lower() in {"1", "true", "yes", "on"}


@app.get("/api/health")
def health():
    return jsonify({"status": "ok"})


@app.post("/api/schedule")
def schedule():
    form = request.get_json(silent=True) if request.is_json else request.form
    form = form or {}
    if not isinstance(form, Mapping):
        logger.info("Rejected schedule request body of type %s", type(form).__name__)
        return jsonify({"error": "Request body must be a JSON object."}), 400
    try:
        loan = _form_to_request(form)
    except ValueError as exc:
        logger.info("Rejected schedule request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    try:
        result = build_schedule(loan)
        summary = summarize(loan, result)
    except ArithmeticError as exc:
        logger.info("Schedule computation failed: %r", exc)
        return jsonify({"error": "Loan amounts are too large to compute."}), 400

    rows = result.rows
    if not _is_truthy(form.get("full_schedule", "")):
        preview = app.config["PREVIEW_ROWS"]
        if len(rows) > preview:
            summary["hidden_rows"] = len(rows) - preview
            rows = rows[:preview]

    return jsonify({"summary": summary, "schedule": [row_to_dict(r) for r in rows]})


if __name__ == "__main__":
    print("Starting amortization calculator API...")
    app.run(host="0.0.0.0", port=int(os.environ.get("AMORT_PORT", "8710")), debug=True)
