# cvportal/client.py
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import httpx

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
}


class PortalError(Exception):
    def __init__(self, status_code, message):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class UnsupportedFileError(ValueError):
    """Raised before any request is sent when a file type is not accepted."""


@dataclass
class HRSession:
    """Connection state for one HR user: where the API lives and the bearer token."""

    base_url: str
    token: Optional[str] = None
    email: Optional[str] = None

    @property
    def authenticated(self):
        return bool(self.token)

    def auth_headers(self):
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@dataclass
class UploadSelection:
    """Files picked for upload, validated by extension as they are added."""

    files: List[str] = field(default_factory=list)

    def add(self, paths: Iterable[str]):
        paths = list(paths)
        invalid = [p for p in paths if os.path.splitext(p)[1].lower() not in ALLOWED_EXTENSIONS]
        if invalid:
            raise UnsupportedFileError(
                f"Unsupported file type: {', '.join(invalid)} (allowed: PDF, DOCX, TXT)"
            )
        self.files.extend(paths)
        return self

    def remove(self, index: int):
        del self.files[index]

    def clear(self):
        self.files.clear()

    def __len__(self):
        return len(self.files)


class PortalClient:
    def __init__(self, session: HRSession, http: Optional[httpx.Client] = None, timeout=120):
        self.session = session
        self.http = http or httpx.Client(base_url=session.base_url, timeout=timeout)

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method, url, auth=True, **kwargs):
        headers = kwargs.pop("headers", {})
        if auth:
            headers.update(self.session.auth_headers())
        response = self.http.request(method, url, headers=headers, **kwargs)
        if response.status_code >= 400:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise PortalError(response.status_code, message)
        return response

    # public intake
    def upload_cv(self, path):
        ext = os.path.splitext(path)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise UnsupportedFileError(f"Unsupported file type: {path} (allowed: PDF, DOCX, TXT)")

        with open(path, "rb") as f:
            files = {"cv": (os.path.basename(path), f, ALLOWED_EXTENSIONS[ext])}
            return self._request("POST", "/api/cv/upload", auth=False, files=files).json()

    def upload_selection(self, selection: UploadSelection):
        results = [self.upload_cv(path) for path in selection.files]
        selection.clear()
        return results

    # auth
    def login(self, email, password):
        data = self._request(
            "POST", "/api/hr/login", auth=False, json={"email": email, "password": password}
        ).json()
        self.session.token = data["token"]
        self.session.email = data["user"]["email"]
        return data

    def logout(self):
        self.session.token = None
        self.session.email = None

    # jobs
    def list_jobs(self):
        return self._request("GET", "/api/hr/jobs").json()

    def get_job(self, job_id):
        return self._request("GET", f"/api/hr/jobs/{job_id}").json()

    def create_job(self, **fields):
        return self._request("POST", "/api/hr/jobs", json=fields).json()

    def update_job(self, job_id, **fields):
        return self._request("PUT", f"/api/hr/jobs/{job_id}", json=fields).json()

    def delete_job(self, job_id):
        return self._request("DELETE", f"/api/hr/jobs/{job_id}").json()

    # candidates
    def list_candidates(self):
        return self._request("GET", "/api/hr/candidates").json()

    def get_candidate(self, candidate_id):
        return self._request("GET", f"/api/hr/candidates/{candidate_id}").json()

    def update_candidate(self, candidate_id, name, tag=None, **fields):
        payload = {"name": name, "tag": tag, **fields}
        return self._request("PUT", f"/api/hr/candidates/{candidate_id}", json=payload).json()

    def set_tag(self, candidate_id, tag):
        return self._request("PUT", f"/api/hr/candidates/{candidate_id}/tag", json={"tag": tag}).json()

    def delete_candidate(self, candidate_id):
        return self._request("DELETE", f"/api/hr/candidates/{candidate_id}").json()

    def download_cv(self, candidate_id):
        return self._request("GET", f"/api/hr/candidates/{candidate_id}/download").content

    # assessment and reports
    def analyze(self, candidate_id, job_id=None):
        payload = {"candidateId": candidate_id}
        if job_id is not None:
            payload["jobId"] = job_id
        return self._request("POST", "/api/hr/analyze", json=payload).json()

    def list_reports(self, search=None, tags=None, scores=None):
        params = {}
        if search:
            params["search"] = search
        if tags:
            params["tags"] = ",".join(tags)
        if scores:
            params["scores"] = ",".join(scores)
        return self._request("GET", "/api/hr/reports", params=params).json()

    def get_report(self, report_id):
        return self._request("GET", f"/api/hr/reports/{report_id}").json()

    def download_report(self, report_id):
        return self._request("GET", f"/api/hr/reports/{report_id}/download").content

    def delete_report(self, report_id):
        return self._request("DELETE", f"/api/hr/reports/{report_id}").json()
