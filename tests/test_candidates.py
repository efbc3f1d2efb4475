import os
import random

from cvportal.extensions import db
from cvportal.models import CANDIDATE_TAGS, Candidate
from cvportal.services import intake
from cvportal.services.cv_parser import DOCX_MEDIA_TYPE
from cvportal.services.intake import REFERENCE_CODE_PATTERN


def test_upload_creates_candidate_without_token(client, auth, upload, app):
    response = upload()

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert REFERENCE_CODE_PATTERN.match(body["referenceCode"])
    assert body["candidateName"] == "Jane Doe CV"

    candidates = client.get("/api/hr/candidates", headers=auth).get_json()
    assert len(candidates) == 1
    candidate = candidates[0]
    assert candidate["reference_code"] == body["referenceCode"]
    assert candidate["tag"] == "Pending"
    assert "cv_text" not in candidate
    assert os.path.exists(candidate["cv_file_path"])
    assert candidate["cv_file_path"].startswith(app.config["UPLOAD_FOLDER"])


def test_upload_stores_extracted_text(client, auth, upload, candidate_id):
    detail = client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).get_json()

    assert detail["cv_text"] == "Python developer with 5 years of SQL"
    assert detail["media_type"] == "text/plain"


def test_empty_file_falls_back_to_filename_text(client, auth, upload):
    upload(filename="blank.txt", content=b"   \n")

    candidate = client.get("/api/hr/candidates", headers=auth).get_json()[0]
    detail = client.get(f"/api/hr/candidates/{candidate['id']}", headers=auth).get_json()

    assert detail["cv_text"] == "Text could not be extracted - file name: blank.txt"


def test_upload_rejects_disallowed_media_type(client, upload, app):
    response = upload(filename="photo.png", content=b"\x89PNG", mimetype="image/png")

    assert response.status_code == 400
    folder = app.config["UPLOAD_FOLDER"]
    assert not os.path.exists(folder) or os.listdir(folder) == []


def test_upload_requires_file(client):
    response = client.post("/api/cv/upload", data={}, content_type="multipart/form-data")

    assert response.status_code == 400


def test_upload_rejects_oversized_file(client, upload):
    response = upload(content=b"x" * (10 * 1024 * 1024 + 1))

    assert response.status_code == 413


def test_reference_codes_are_unique(app, client, auth, upload, monkeypatch):
    first = upload().get_json()["referenceCode"]

    # first reference draw repeats the code already taken
    taken = int(first.rsplit("-", 1)[1])
    draws = iter([taken, 424242])
    real_randint = intake.random.randint

    def fake_randint(a, b):
        if b == 999999:
            return next(draws)
        return real_randint(a, b)

    monkeypatch.setattr(intake.random, "randint", fake_randint)

    second = upload(filename="other.txt").get_json()["referenceCode"]

    assert second != first
    assert second.endswith("-424242")
    codes = [c["reference_code"] for c in client.get("/api/hr/candidates", headers=auth).get_json()]
    assert len(codes) == len(set(codes)) == 2


def test_make_reference_code_pads_digits():
    rng = random.Random()
    rng.randint = lambda a, b: 42

    assert intake.make_reference_code(year=2026, rng=rng) == "CND-2026-000042"


def test_candidate_name_from_filename():
    assert intake.candidate_name_from_filename("John_Smith-resume.pdf") == "John Smith resume"
    assert intake.candidate_name_from_filename("plain") == "plain"
    assert intake.candidate_name_from_filename(".pdf") == ".pdf"


def test_update_candidate(client, auth, candidate_id):
    response = client.put(
        f"/api/hr/candidates/{candidate_id}",
        json={"name": "  Jane Doe ", "tag": "Approved", "email": "jane@example.com", "notes": "strong"},
        headers=auth,
    )

    assert response.status_code == 200
    detail = client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).get_json()
    assert detail["name"] == "Jane Doe"
    assert detail["tag"] == "Approved"
    assert detail["email"] == "jane@example.com"
    assert detail["notes"] == "strong"


def test_update_candidate_defaults_tag_to_pending(client, auth, candidate_id):
    client.put(f"/api/hr/candidates/{candidate_id}/tag", json={"tag": "On Hold"}, headers=auth)

    client.put(f"/api/hr/candidates/{candidate_id}", json={"name": "Jane"}, headers=auth)

    detail = client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).get_json()
    assert detail["tag"] == "Pending"


def test_update_candidate_requires_name(client, auth, candidate_id):
    response = client.put(f"/api/hr/candidates/{candidate_id}", json={"name": "  "}, headers=auth)

    assert response.status_code == 400


def test_set_tag(client, auth, candidate_id):
    for tag in CANDIDATE_TAGS:
        response = client.put(f"/api/hr/candidates/{candidate_id}/tag", json={"tag": tag}, headers=auth)
        assert response.status_code == 200
        assert client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).get_json()["tag"] == tag


def test_tag_outside_enumeration_is_rejected(app, client, auth, candidate_id):
    response = client.put(f"/api/hr/candidates/{candidate_id}/tag", json={"tag": "Hired!!"}, headers=auth)

    assert response.status_code == 400
    assert response.get_json()["allowed_tags"] == list(CANDIDATE_TAGS)

    response = client.put(
        f"/api/hr/candidates/{candidate_id}", json={"name": "Jane", "tag": "Hired!!"}, headers=auth
    )
    assert response.status_code == 400

    with app.app_context():
        assert db.session.get(Candidate, candidate_id).tag == "Pending"
    assert client.get("/api/hr/reports?tags=Pending", headers=auth).status_code == 200


def test_candidate_tags_endpoint(client, auth):
    assert client.get("/api/hr/candidate-tags", headers=auth).get_json() == list(CANDIDATE_TAGS)


def test_delete_candidate_removes_row_and_file(client, auth, candidate_id):
    path = client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).get_json()["cv_file_path"]
    assert os.path.exists(path)

    response = client.delete(f"/api/hr/candidates/{candidate_id}", headers=auth)

    assert response.status_code == 200
    assert not os.path.exists(path)
    assert client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).status_code == 404


def test_download_cv(client, auth, candidate_id):
    response = client.get(f"/api/hr/candidates/{candidate_id}/download", headers=auth)

    assert response.status_code == 200
    assert response.data == b"Python developer with 5 years of SQL"
    assert "Jane Doe CV.txt" in response.headers["Content-Disposition"]


def test_download_keeps_extension_of_non_ascii_filename(client, auth, upload):
    upload(filename="简历.docx", content=b"not really a docx", mimetype=DOCX_MEDIA_TYPE)
    candidate = client.get("/api/hr/candidates", headers=auth).get_json()[0]
    assert not candidate["cv_file_path"].endswith(".docx")

    response = client.get(f"/api/hr/candidates/{candidate['id']}/download", headers=auth)

    assert response.status_code == 200
    disposition = response.headers["Content-Disposition"]
    assert disposition.endswith(".docx")
    assert ".pdf" not in disposition


def test_update_candidate_rejects_malformed_bodies(client, auth, candidate_id):
    url = f"/api/hr/candidates/{candidate_id}"
    for body in (["Jane"], {"name": "Jane", "email": {"a": 1}}, {"name": "Jane", "notes": ["x"]},
                 {"name": "Jane", "phone": 5551234}, {"name": "Jane", "tag": ["Approved"]}):
        assert client.put(url, json=body, headers=auth).status_code == 400, body

    for body in ([1], {"tag": ["Approved"]}, {"tag": {"x": 1}}):
        assert client.put(f"{url}/tag", json=body, headers=auth).status_code == 400, body

    detail = client.get(url, headers=auth).get_json()
    assert detail["name"] == "Jane Doe CV"
    assert detail["email"] is None
    assert detail["tag"] == "Pending"


def test_download_missing_file_returns_404(client, auth, candidate_id):
    path = client.get(f"/api/hr/candidates/{candidate_id}", headers=auth).get_json()["cv_file_path"]
    os.remove(path)

    response = client.get(f"/api/hr/candidates/{candidate_id}/download", headers=auth)

    assert response.status_code == 404


def test_unknown_candidate_returns_404(client, auth):
    assert client.get("/api/hr/candidates/42", headers=auth).status_code == 404
    assert client.put("/api/hr/candidates/42", json={"name": "x"}, headers=auth).status_code == 404
    assert client.put("/api/hr/candidates/42/tag", json={"tag": "Pending"}, headers=auth).status_code == 404
    assert client.delete("/api/hr/candidates/42", headers=auth).status_code == 404


def test_candidate_routes_require_token(client, candidate_id):
    assert client.get("/api/hr/candidates").status_code == 401
    assert client.delete(f"/api/hr/candidates/{candidate_id}").status_code == 401
