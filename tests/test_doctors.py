import pytest
from sqlalchemy.exc import IntegrityError

from docspot.core.database import SessionLocal
from docspot.models.doctor import Doctor, DoctorStatus

from .utils import (
    SECOND_ADMIN_EMAIL, api, doctor_application, get_profile, register_and_login
)


def apply(client, headers, **overrides):
    return client.post(
        api("/doctors/apply-doctor"), json=doctor_application(**overrides), headers=headers
    )


def all_doctors(client):
    response = client.get(api("/doctors/get-all-doctors"))
    assert response.status_code == 200
    return response.json()


def change_status(client, headers, doctor_id, status):
    return client.post(
        api("/doctors/change-status"),
        json={"doctorId": doctor_id, "status": status},
        headers=headers,
    )


class TestApplyDoctor:

    def test_apply_creates_pending_application(self, client, doctor_user):
        headers, user = doctor_user

        response = apply(client, headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Doctor Application Submitted"

        doctors = all_doctors(client)
        assert len(doctors) == 1
        doctor = doctors[0]
        assert doctor["userId"] == user["id"]
        assert doctor["status"] == "pending"
        assert doctor["fullname"] == "Dr. Grace Hopper"
        assert doctor["fees"] == 500
        assert doctor["timings"] == ["Mon 09:00-12:00", "Wed 14:00-17:00"]

    def test_apply_requires_authentication(self, client):
        response = client.post(api("/doctors/apply-doctor"), json=doctor_application())
        assert response.status_code == 401

    def test_apply_requires_core_fields(self, client, doctor_user):
        headers, _ = doctor_user
        body = doctor_application()
        del body["specialization"]

        response = client.post(api("/doctors/apply-doctor"), json=body, headers=headers)
        assert response.status_code == 422

    def test_reapply_while_pending_overwrites_in_place(self, client, doctor_user):
        headers, _ = doctor_user
        apply(client, headers)
        original = all_doctors(client)[0]

        response = apply(client, headers, specialization="Neurologist", fees=800)
        assert response.status_code == 200

        doctors = all_doctors(client)
        assert len(doctors) == 1
        assert doctors[0]["id"] == original["id"]
        assert doctors[0]["status"] == "pending"
        assert doctors[0]["specialization"] == "Neurologist"
        assert doctors[0]["fees"] == 800

    def test_reapply_after_approval_refused(self, client, approved_doctor):
        headers, doctor = approved_doctor

        response = apply(client, headers, specialization="Dermatologist")
        assert response.status_code == 400
        assert response.json()["detail"] == "Your doctor account is already approved."

        stored = all_doctors(client)[0]
        assert stored["specialization"] == doctor["specialization"]
        assert stored["status"] == "approved"

    def test_reapply_after_rejection_refused(self, client, admin, doctor_user):
        headers, _ = doctor_user
        apply(client, headers)
        doctor = all_doctors(client)[0]
        admin_headers, _ = admin
        change_status(client, admin_headers, doctor["id"], "rejected")

        response = apply(client, headers, fees=1)
        assert response.status_code == 400
        assert response.json()["detail"] == "Your application was rejected. Please contact support."
        assert all_doctors(client)[0]["fees"] == 500

    def test_every_admin_is_notified(self, client, admin, doctor_user):
        admin_headers, _ = admin
        second_admin_headers, _ = register_and_login(client, "Admin 2", SECOND_ADMIN_EMAIL)
        headers, _ = doctor_user

        apply(client, headers)

        for h in (admin_headers, second_admin_headers):
            notifications = get_profile(client, h)["notifications"]
            assert len(notifications) == 1
            assert notifications[0]["type"] == "doctor-request"
            assert notifications[0]["message"] == "Dr. Grace Hopper applied for doctor account"

        # The applicant is not an admin and hears nothing
        assert get_profile(client, headers)["notifications"] == []

    def test_apply_without_admins_still_succeeds(self, client, doctor_user):
        headers, _ = doctor_user
        assert apply(client, headers).status_code == 200
        assert len(all_doctors(client)) == 1


class TestListDoctors:

    def test_lists_every_status_without_authentication(self, client, admin):
        admin_headers, _ = admin
        for name in ("pending", "approved", "rejected"):
            headers, _ = register_and_login(client, name, f"{name}@example.com")
            apply(client, headers, fullname=f"Dr. {name}")

        doctors = {d["fullname"]: d for d in all_doctors(client)}
        change_status(client, admin_headers, doctors["Dr. approved"]["id"], "approved")
        change_status(client, admin_headers, doctors["Dr. rejected"]["id"], "rejected")

        statuses = sorted(d["status"] for d in all_doctors(client))
        assert statuses == ["approved", "pending", "rejected"]


class TestChangeStatus:

    def test_approve_sets_flag_and_notifies_owner(self, client, admin, doctor_user):
        headers, _ = doctor_user
        apply(client, headers)
        doctor = all_doctors(client)[0]
        before = get_profile(client, headers)
        assert before["isDoctor"] is False

        admin_headers, _ = admin
        response = change_status(client, admin_headers, doctor["id"], "approved")
        assert response.status_code == 200
        assert response.json()["status"] == "approved"

        after = get_profile(client, headers)
        assert after["isDoctor"] is True
        assert len(after["notifications"]) == len(before["notifications"]) + 1
        assert after["notifications"][-1]["type"] == "doctor-status"
        assert after["notifications"][-1]["message"] == "Your doctor account has been approved"

    def test_reject_leaves_doctor_flag_unchanged(self, client, admin, doctor_user):
        headers, _ = doctor_user
        apply(client, headers)
        doctor = all_doctors(client)[0]
        admin_headers, _ = admin

        response = change_status(client, admin_headers, doctor["id"], "rejected")
        assert response.status_code == 200

        profile = get_profile(client, headers)
        assert profile["isDoctor"] is False
        assert profile["notifications"][-1]["message"] == "Your doctor account has been rejected"

    def test_reject_after_approval_keeps_doctor_flag(self, client, admin, approved_doctor):
        headers, doctor = approved_doctor
        admin_headers, _ = admin

        response = change_status(client, admin_headers, doctor["id"], "rejected")
        assert response.status_code == 200
        assert get_profile(client, headers)["isDoctor"] is True

    def test_non_admin_forbidden(self, client, doctor_user, patient):
        headers, _ = doctor_user
        apply(client, headers)
        doctor = all_doctors(client)[0]
        patient_headers, _ = patient

        response = change_status(client, patient_headers, doctor["id"], "approved")
        assert response.status_code == 403
        assert all_doctors(client)[0]["status"] == "pending"

    def test_unknown_doctor(self, client, admin):
        admin_headers, _ = admin
        response = change_status(client, admin_headers, 12345, "approved")
        assert response.status_code == 404
        assert response.json()["detail"] == "Doctor not found"

    def test_unknown_status_rejected(self, client, admin, doctor_user):
        headers, _ = doctor_user
        apply(client, headers)
        doctor = all_doctors(client)[0]
        admin_headers, _ = admin

        response = change_status(client, admin_headers, doctor["id"], "on-hold")
        assert response.status_code == 422

    def test_invalid_transition(self, client, admin, approved_doctor):
        _, doctor = approved_doctor
        admin_headers, _ = admin

        for status in ("approved", "pending"):
            response = change_status(client, admin_headers, doctor["id"], status)
            assert response.status_code == 409
            assert response.json()["detail"] == f"Cannot change doctor status from approved to {status}"


class TestUpdateProfile:

    def test_partial_update_keeps_other_fields(self, client, approved_doctor):
        headers, doctor = approved_doctor

        response = client.put(
            api("/doctors/update-profile"),
            json={"fees": 750, "timings": ["Fri 10:00-13:00"]},
            headers=headers,
        )
        assert response.status_code == 200

        updated = response.json()
        assert updated["fees"] == 750
        assert updated["timings"] == ["Fri 10:00-13:00"]
        for field in ("fullname", "phone", "address", "specialization", "experience", "email"):
            assert updated[field] == doctor[field]
        assert updated["status"] == "approved"

    def test_empty_values_are_ignored(self, client, approved_doctor):
        headers, doctor = approved_doctor

        response = client.put(
            api("/doctors/update-profile"),
            json={"fullname": "", "phone": "", "experience": 0, "fees": 0, "timings": []},
            headers=headers,
        )
        assert response.status_code == 200

        updated = all_doctors(client)[0]
        for field in ("fullname", "phone", "experience", "fees", "timings"):
            assert updated[field] == doctor[field]

    def test_email_is_not_editable(self, client, approved_doctor):
        headers, doctor = approved_doctor

        client.put(
            api("/doctors/update-profile"),
            json={"email": "other@example.com"},
            headers=headers,
        )
        assert all_doctors(client)[0]["email"] == doctor["email"]

    def test_pending_doctor_can_edit_without_status_change(self, client, doctor_user):
        headers, _ = doctor_user
        apply(client, headers)

        response = client.put(
            api("/doctors/update-profile"), json={"address": "2 Clinic Road"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["address"] == "2 Clinic Road"
        assert response.json()["status"] == "pending"

    def test_without_doctor_profile(self, client, patient):
        headers, _ = patient
        response = client.put(api("/doctors/update-profile"), json={"fees": 10}, headers=headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Doctor profile not found."


class TestConcurrentWrites:

    def test_concurrent_edit_during_approval(self, client, admin, doctor_user, monkeypatch):
        headers, _ = doctor_user
        apply(client, headers)
        doctor = all_doctors(client)[0]
        admin_headers, _ = admin
        original_check = Doctor.can_transition_to

        def edited_meanwhile(self, new_status):
            # The applicant edits the record after the admin request loaded it
            with SessionLocal() as other:
                other.get(Doctor, self.id).phone = "555-0199"
                other.commit()
            return original_check(self, new_status)

        monkeypatch.setattr(Doctor, "can_transition_to", edited_meanwhile)

        response = change_status(client, admin_headers, doctor["id"], "approved")
        assert response.status_code == 409
        assert response.json()["detail"] == "Record was modified concurrently. Please retry."

        stored = all_doctors(client)[0]
        assert stored["status"] == "pending"
        assert stored["phone"] == "555-0199"
        profile = get_profile(client, headers)
        assert profile["isDoctor"] is False
        assert profile["notifications"] == []

    def test_one_record_per_user_enforced_by_store(self, client, doctor_user, db_session):
        headers, user = doctor_user
        apply(client, headers)

        db_session.add(Doctor(
            user_id=user["id"], fullname="Duplicate", specialization="GP",
            status=DoctorStatus.PENDING,
        ))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        assert len(all_doctors(client)) == 1
