"""HTTP interface for the debt calculator.

A small Flask application exposing the rate solver, the schedule generator
and the payment allocator as JSON endpoints. Request bodies may be JSON or
form-encoded. Rates cross this boundary as percentages and are converted to
fractions before reaching the engine.
"""

import logging
import os

from flask import Flask, jsonify, request

from debt_calc.config import load_currency_places, load_solver_settings
from debt_calc.data_models import DebtSnapshot, PaymentMode
from debt_calc.engine import allocate_against, generate_schedule
from debt_calc.exceptions import DebtCalcError, InsufficientPayment, InvalidInput, NoConvergence
from debt_calc.main import rate_payload, serialize_schedule, serialize_summary
from debt_calc.solver import require_periodic_rate
from debt_calc.summary import summarize_schedule
from debt_calc.utils import annual_to_periodic, percent_to_fraction, to_decimal, to_installment_count

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["CURRENCY_PLACES"] = load_currency_places()
app.config["SOLVER_SETTINGS"] = load_solver_settings()


def _payload() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _required(data: dict, name: str):
    value = data.get(name)
    if value is None or value == "":
        raise InvalidInput(name, value, "is required")
    return value


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _error_response(exc: DebtCalcError, error_type: str, status: int):
    return jsonify({"error": exc.message, "error_type": error_type, "details": _jsonable(exc.details)}), status


def _jsonable(details: dict) -> dict:
    return {k: v if isinstance(v, (int, float, str, bool)) or v is None else str(v) for k, v in details.items()}


@app.errorhandler(InvalidInput)
def handle_invalid_input(exc: InvalidInput):
    return _error_response(exc, "INVALID_INPUT", 400)


@app.errorhandler(NoConvergence)
def handle_no_convergence(exc: NoConvergence):
    logger.info("Rate undetermined: %s", exc)
    return _error_response(exc, "NO_CONVERGENCE", 422)


@app.errorhandler(InsufficientPayment)
def handle_insufficient_payment(exc: InsufficientPayment):
    return _error_response(exc, "INSUFFICIENT_PAYMENT", 422)


@app.get("/health")
def health():
    return jsonify({"status": "ok"})


@app.post("/api/rate")
def solve_rate():
    data = _payload()
    periodic_rate = require_periodic_rate(
        to_decimal(_required(data, "principal"), "principal"),
        to_installment_count(_required(data, "installment_count")),
        to_decimal(_required(data, "installment_amount"), "installment_amount"),
        app.config["SOLVER_SETTINGS"],
    )
    return jsonify(rate_payload(periodic_rate))


@app.post("/api/schedule")
def schedule():
    data = _payload()
    principal = to_decimal(_required(data, "principal"), "principal")
    count = to_installment_count(_required(data, "installment_count"))
    amount = to_decimal(_required(data, "installment_amount"), "installment_amount")
    if data.get("rate_percent") not in (None, ""):
        periodic_rate = percent_to_fraction(data["rate_percent"])
    else:
        periodic_rate = require_periodic_rate(principal, count, amount, app.config["SOLVER_SETTINGS"])

    rows = generate_schedule(principal, periodic_rate, count, amount)
    body = {
        "rate": rate_payload(float(periodic_rate)),
        "schedule": serialize_schedule(rows),
        "summary": serialize_summary(summarize_schedule(rows, principal)),
    }
    if data.get("status_after") not in (None, ""):
        through = to_installment_count(data["status_after"], "status_after")
        body["status"] = serialize_summary(summarize_schedule(rows, principal, through))
    return jsonify(body)


@app.post("/api/allocate")
def allocate():
    data = _payload()
    periodic_rate = percent_to_fraction(data.get("rate_percent") or 0)
    if _flag(data.get("annual", False)):
        periodic_rate = annual_to_periodic(periodic_rate)
    snapshot = DebtSnapshot(
        outstanding_balance=to_decimal(_required(data, "outstanding_balance"), "outstanding_balance"),
        periodic_rate=periodic_rate,
    )
    mode = data.get("mode") or PaymentMode.FIXED_INSTALLMENT.value
    allocation = allocate_against(
        snapshot, _required(data, "payment_amount"), mode, app.config["CURRENCY_PLACES"]
    )
    return jsonify(
        {
            "interest_portion": float(allocation.interest_portion),
            "capital_portion": float(allocation.capital_portion),
            "unapplied": float(allocation.unapplied),
        }
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", "8710"))
    print(f"Starting debt calculator API on port {port}...")
    app.run(port=port)
