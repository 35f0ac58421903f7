"""
inventory_client.py

A tiny API client for the Inventory Tracker backend (JWT login + authenticated
requests), for scripts and bots that want to drive an inventory without the
web UI.

Environment variables expected:
- INVENTORY_API_URL: e.g. "https://your-domain.com/api"
- INVENTORY_API_EMAIL: user's email (must exist in backend)
- INVENTORY_API_PASSWORD: user's password

Optional:
- INVENTORY_API_TOKEN: if you want to pre-seed a token (otherwise we login)

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests


class ApiError(RuntimeError):
    pass


@dataclass
class InventoryApiClient:
    base_url: str
    email: str
    password: str
    token: Optional[str] = None

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def login(self) -> str:
        """
        FastAPI-Users JWT login endpoint.
        The backend uses: POST /auth/jwt/login with form fields: username, password
        """
        resp = requests.post(
            self._url("/auth/jwt/login"),
            data={"username": self.email, "password": self.password},
            headers={"Accept": "application/json"},
            timeout=30,
        )
        if resp.status_code >= 400:
            raise ApiError(f"Login failed ({resp.status_code}): {resp.text}")
        data = resp.json()
        token = data.get("access_token")
        if not token:
            raise ApiError(f"Login response missing access_token: {data}")
        self.token = token
        return token

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        if not self.token:
            self.login()

        resp = requests.request(method, self._url(path), headers=self._headers(), timeout=60, **kwargs)

        # If token expired, retry once with a fresh login.
        if resp.status_code in (401, 403):
            self.login()
            resp = requests.request(method, self._url(path), headers=self._headers(), timeout=60, **kwargs)

        if resp.status_code >= 400:
            raise ApiError(f"{method} {path} failed ({resp.status_code}): {resp.text}")
        return resp

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self._send(method, path, **kwargs)
        if resp.status_code == 204:
            return None
        return resp.json()

    # ----------------------------
    # Inventory helpers
    # ----------------------------

    def view(self, *, search: Optional[str] = None, page: Optional[int] = None) -> Any:
        """Calls: GET /inventory/ (reloads and returns the current page)"""
        params: Dict[str, Any] = {}
        if search is not None:
            params["search"] = search
        if page is not None:
            params["page"] = page
        return self._request("GET", "/inventory/", params=params)

    def add_item(self, name: str) -> Any:
        return self._request("POST", "/inventory/items", json={"name": name})

    def remove_item(self, name: str) -> Any:
        return self._request("POST", f"/inventory/items/{quote(name, safe='')}/decrement")

    def delete_item(self, name: str) -> Any:
        return self._request("DELETE", f"/inventory/items/{quote(name, safe='')}")

    def scan_image(self, path: str, content_type: str = "image/jpeg") -> List[Dict[str, Any]]:
        """
        Calls: POST /inventory/scan
        Returns the pending scanned items; nothing is added until confirm_scan().
        """
        with open(path, "rb") as fh:
            data = self._request(
                "POST",
                "/inventory/scan",
                files={"file": (os.path.basename(path), fh, content_type)},
            )
        return data.get("inventory", [])

    def edit_scanned_item(
        self,
        index: int,
        *,
        name: Optional[str] = None,
        quantity: Optional[int] = None,
        selected: Optional[bool] = None,
    ) -> Any:
        payload = {k: v for k, v in {"name": name, "quantity": quantity, "selected": selected}.items() if v is not None}
        return self._request("PATCH", f"/inventory/scan/{index}", json=payload)

    def confirm_scan(self) -> Any:
        return self._request("POST", "/inventory/scan/confirm")

    def cancel_scan(self) -> None:
        self._request("DELETE", "/inventory/scan")

    def export_csv(self, inventory: Optional[List[Dict[str, Any]]] = None) -> str:
        """
        Calls: POST /inventory/export
        Exports ``inventory`` or, if omitted, every item currently stored.
        """
        if inventory is None:
            inventory = self._all_items()
        return self._send("POST", "/inventory/export", json=inventory).text

    def _all_items(self) -> List[Dict[str, Any]]:
        first = self.view(search="", page=1)
        items = list(first["items"])
        for page in range(2, first["total_pages"] + 1):
            items.extend(self.view(page=page)["items"])
        return items

    def logout(self) -> None:
        """
        Calls: POST /session/logout
        JWT tokens are stateless, so /auth/jwt/logout does not touch the
        server-side inventory session; this route is the one that discards the
        cached inventory, view cursor and pending scan. The local token is
        dropped afterwards, so the next call logs in again.
        """
        self._request("POST", "/session/logout")
        self.token = None


def make_client_from_env() -> InventoryApiClient:
    base_url = os.getenv("INVENTORY_API_URL", "").strip()
    email = os.getenv("INVENTORY_API_EMAIL", "").strip()
    password = os.getenv("INVENTORY_API_PASSWORD", "").strip()
    token = os.getenv("INVENTORY_API_TOKEN", "").strip() or None

    if not base_url:
        raise RuntimeError("Missing INVENTORY_API_URL")
    if not email:
        raise RuntimeError("Missing INVENTORY_API_EMAIL")
    if not password:
        raise RuntimeError("Missing INVENTORY_API_PASSWORD")

    return InventoryApiClient(base_url=base_url, email=email, password=password, token=token)


# -----------------------------------------------------------------------------
# Minimal "manual test" usage: print the inventory as CSV
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    client = make_client_from_env()
    sys.stdout.write(client.export_csv())
