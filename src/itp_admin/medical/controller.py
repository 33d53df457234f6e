from __future__ import annotations

from flask import Flask

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/medical/appointments", endpoint="medical_appointments")
    @login_required
    def medical_appointments():
        return ok(appointments=to_jsonable(container.medical_service.list_appointments()))

    @app.route("/api/medical/appointments", methods=["POST"], endpoint="medical_appointment_create")
    @login_required
    def medical_appointment_create():
        appointment_id = container.medical_service.create_appointment(request_data())
        return ok(appointment_id=appointment_id), 201

    @app.route("/api/medical/appointments/<int:appointment_id>", methods=["PATCH", "PUT"], endpoint="medical_appointment_update")
    @login_required
    def medical_appointment_update(appointment_id: int):
        container.medical_service.update_appointment(appointment_id, request_data())
        return ok()

    @app.route("/api/medical/appointments/<int:appointment_id>", methods=["DELETE"], endpoint="medical_appointment_delete")
    @login_required
    def medical_appointment_delete(appointment_id: int):
        container.medical_service.delete_appointment(appointment_id)
        return ok()

    @app.route("/api/medical/claims", endpoint="medical_claims")
    @login_required
    def medical_claims():
        return ok(claims=to_jsonable(container.medical_service.list_claims()))

    @app.route("/api/medical/claims", methods=["POST"], endpoint="medical_claim_create")
    @login_required
    def medical_claim_create():
        claim_id = container.medical_service.create_claim(request_data())
        return ok(claim_id=claim_id), 201

    @app.route("/api/medical/claims/<int:claim_id>/status", methods=["POST"], endpoint="medical_claim_status")
    @login_required
    def medical_claim_status(claim_id: int):
        data = request_data()
        status = container.medical_service.change_claim_status(
            claim_id,
            data.get("status"),
            payment_reference=data.get("payment_reference"),
            rejection_reason=data.get("rejection_reason"),
        )
        return ok(status=status.value)
