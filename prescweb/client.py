# prescweb/client.py
"""
HTTP client for the PrescWeb API.

Used by the prescription builder (and scripts) to reach the backend.
Every transport failure or non-2xx response is raised as ClientError so
callers have a single exception to handle.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from prescweb.schemas.medicine import MedicineDetails, MedicineSummary
from prescweb.schemas.prescription import PrescriptionList, PrescriptionPayload, PrescriptionRecord
from prescweb.schemas.template import TemplateCreate, TemplateData, TemplateResponse

logger = logging.getLogger(__name__)


class ClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message") or body.get("error")
        if detail:
            return detail if isinstance(detail, str) else str(detail)
    return f"HTTP {response.status_code}"


class PrescwebClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3001",
        *,
        api_prefix: str = "/api",
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._prefix = api_prefix

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "PrescwebClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, f"{self._prefix}{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ClientError(f"Request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ClientError(_error_detail(response), status_code=response.status_code)
        if not response.content:
            return None
        return response.json()

    # Session

    def login(self, username: str, password: str) -> dict:
        body = self._request("POST", "/login", json={"username": username, "password": password})
        # The cookie jar keeps the session; the header covers clients without one.
        self._http.headers["Authorization"] = f"Bearer {body['accessToken']}"
        return body["doctor"]

    def logout(self) -> None:
        self._request("POST", "/logout")
        self._http.headers.pop("Authorization", None)

    # Medicines

    def search_medicines(self, query: str) -> list[MedicineSummary]:
        if not query or not query.strip():
            return []
        rows = self._request("GET", "/medicines/search", params={"q": query})
        return [MedicineSummary.model_validate(row) for row in rows]

    def get_medicine_details(self, generic_name: str) -> MedicineDetails:
        return MedicineDetails.model_validate(
            self._request("GET", f"/medicines/details/{quote(generic_name, safe='')}")
        )

    # Prescriptions

    def create_prescription(self, payload: PrescriptionPayload) -> int:
        body = self._request(
            "POST",
            "/prescriptions",
            json=payload.model_dump(mode="json", by_alias=True),
        )
        return body["prescriptionId"]

    def list_prescriptions(self, **filters: str) -> PrescriptionList:
        params = {k: v for k, v in filters.items() if v}
        return PrescriptionList.model_validate(self._request("GET", "/prescriptions", params=params))

    def get_prescription(self, prescription_id: int) -> PrescriptionRecord:
        return PrescriptionRecord.model_validate(
            self._request("GET", f"/prescriptions/{prescription_id}")
        )

    # Templates

    def list_templates(self) -> list[TemplateResponse]:
        return [TemplateResponse.model_validate(t) for t in self._request("GET", "/templates")]

    def create_template(self, name: str, template_data: TemplateData) -> TemplateResponse:
        payload = TemplateCreate(name=name, template_data=template_data)
        return TemplateResponse.model_validate(
            self._request("POST", "/templates", json=payload.model_dump(mode="json", by_alias=True))
        )

    def update_template(self, template_id: int, name: str, template_data: TemplateData) -> TemplateResponse:
        payload = TemplateCreate(name=name, template_data=template_data)
        return TemplateResponse.model_validate(
            self._request(
                "PUT",
                f"/templates/{template_id}",
                json=payload.model_dump(mode="json", by_alias=True),
            )
        )

    def delete_template(self, template_id: int) -> None:
        self._request("DELETE", f"/templates/{template_id}")
