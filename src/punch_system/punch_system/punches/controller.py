from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http_errors import error_response
from ..container import Container
from .model import PunchOutcome, PunchRecord


def punch_to_dict(r: PunchRecord) -> dict:
    return {
        "id": r.record_id,
        "subdomain": r.tenant,
        "rfid": r.badge,
        "worker": r.worker_id,
        "name": r.worker_name,
        "department": r.department_id,
        "departmentName": r.department_name,
        "date": r.date,
        "time": r.time,
        "presence": r.presence,
        "isMissedOutPunch": r.is_missed_out_punch,
        "createdAt": r.created_at.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    recorder = container.punch_recorder

    def _payload() -> dict:
        if request.method == "GET":
            return dict(request.args)
        return request.get_json(silent=True) or {}

    def _created(outcome: PunchOutcome):
        return jsonify({
            "message": outcome.message,
            "attendance": punch_to_dict(outcome.record),
            "missedOutPunch": punch_to_dict(outcome.missed_out) if outcome.missed_out else None,
        }), 201

    @app.route("/api/attendance", methods=["PUT"], endpoint="put_attendance")
    def put_attendance():
        data = _payload()
        try:
            return _created(recorder.record_punch(data.get("subdomain"), data.get("rfid")))
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/rfid", methods=["PUT"], endpoint="put_rfid_attendance")
    def put_rfid_attendance():
        data = _payload()
        try:
            return _created(recorder.record_badge_punch(data.get("rfid")))
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance", methods=["GET"], endpoint="get_attendance")
    def get_attendance():
        data = _payload()
        try:
            records = recorder.list_history(data.get("subdomain"))
        except Exception as e:
            return error_response(e)
        return jsonify({
            "message": "Attendance data retrieved successfully",
            "attendance": [punch_to_dict(r) for r in records],
        }), 200

    @app.route("/api/attendance/worker", methods=["GET"], endpoint="get_worker_attendance")
    def get_worker_attendance():
        data = _payload()
        try:
            records = recorder.list_history(data.get("subdomain"), data.get("rfid") or "")
        except Exception as e:
            return error_response(e)
        return jsonify({
            "message": "Worker attendance data retrieved successfully",
            "attendance": [punch_to_dict(r) for r in records],
        }), 200
