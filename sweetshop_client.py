"""
sweetshop_client.py

Copy this file into any script or bot that needs to talk to the Sweet Shop backend.

What it provides:
- A tiny API client (JWT login + authenticated requests)
- Helpers for:
  - Browsing/searching the catalog: GET /sweets, GET /sweets/search
  - Buying stock: POST /inventory/sweets/{id}/purchase
  - Admin-only: catalog create/update/delete, restock, transaction log

Environment variables expected:
- SWEETSHOP_API_URL: e.g. "https://your-domain.com/api"
- SWEETSHOP_API_EMAIL: user's email (must exist in backend)
- SWEETSHOP_API_PASSWORD: user's password

Optional:
- SWEETSHOP_API_TOKEN: if you want to pre-seed a token (otherwise we login)

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class SweetShopApiClient:
    base_url: str
    email: str
    password: str
    token: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

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
            raise ApiError(f"Login failed ({resp.status_code}): {resp.text}", resp.status_code)
        data = resp.json()
        token = data.get("access_token")
        if not token:
            raise ApiError(f"Login response missing access_token: {data}")
        self.token = token
        return token

    def register(self, *, full_name: str) -> Any:
        """Calls: POST /auth/register with this client's email/password."""
        resp = requests.post(
            self._url("/auth/register"),
            json={"email": self.email, "password": self.password, "full_name": full_name},
            headers={"Accept": "application/json"},
            timeout=30,
        )
        if resp.status_code >= 400:
            raise ApiError(f"Registration failed ({resp.status_code}): {resp.text}", resp.status_code)
        return resp.json()

    def _request(self, method: str, path: str, *, json: Any = None, params: Dict[str, Any] | None = None) -> Any:
        if not self.token:
            self.login()

        url = self._url(path)
        resp = requests.request(
            method,
            url,
            json=json,
            params=params,
            headers=self._headers(),
            timeout=60,
        )

        # If token expired, retry once with a fresh login.
        # 403 is a real permission answer here (non-admin), so only 401 triggers it.
        if resp.status_code == 401:
            self.login()
            resp = requests.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=60,
            )

        if resp.status_code >= 400:
            raise ApiError(f"{method} {path} failed ({resp.status_code}): {resp.text}", resp.status_code)

        if resp.status_code == 204:
            return None
        return resp.json()

    # ----------------------------
    # Catalog helpers
    # ----------------------------

    def list_sweets(self) -> Any:
        return self._request("GET", "/sweets")

    def search_sweets(
        self,
        *,
        name: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> Any:
        """Calls: GET /sweets/search (only the filters you pass are sent)."""
        params: Dict[str, Any] = {}
        if name:
            params["name"] = name
        if category:
            params["category"] = category
        if min_price is not None:
            params["min_price"] = min_price
        if max_price is not None:
            params["max_price"] = max_price
        return self._request("GET", "/sweets/search", params=params)

    def create_sweet(
        self,
        *,
        name: str,
        category: str,
        price: float,
        quantity: int = 0,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Any:
        """Calls: POST /sweets (admin-only)."""
        payload = {
            "name": name,
            "category": category,
            "price": price,
            "quantity": quantity,
            "description": description,
            "image_url": image_url,
        }
        return self._request("POST", "/sweets", json=payload)

    def update_sweet(self, sweet_id: str, **fields: Any) -> Any:
        """Calls: PUT /sweets/{id} (admin-only). quantity is not accepted; use restock."""
        return self._request("PUT", f"/sweets/{sweet_id}", json=fields)

    def delete_sweet(self, sweet_id: str) -> Any:
        return self._request("DELETE", f"/sweets/{sweet_id}")

    # ----------------------------
    # Inventory helpers
    # ----------------------------

    def purchase(self, sweet_id: str, quantity: int) -> Any:
        """
        Calls: POST /inventory/sweets/{id}/purchase
        Returns {"message": ..., "item": {...}} with the updated stock.
        """
        return self._request("POST", f"/inventory/sweets/{sweet_id}/purchase", json={"quantity": quantity})

    def restock(self, sweet_id: str, quantity: int) -> Any:
        """
        Calls: POST /inventory/sweets/{id}/restock
        admin-only: the user must be a superuser (is_superuser=true).
        """
        return self._request("POST", f"/inventory/sweets/{sweet_id}/restock", json={"quantity": quantity})

    def list_transactions(
        self,
        *,
        sweet_id: Optional[str] = None,
        transaction_type: Optional[str] = None,  # "purchase" | "restock"
        limit: int = 200,
    ) -> Any:
        params: Dict[str, Any] = {"limit": limit}
        if sweet_id:
            params["sweet_id"] = sweet_id
        if transaction_type:
            params["transaction_type"] = transaction_type
        return self._request("GET", "/inventory/transactions", params=params)


def make_client_from_env() -> SweetShopApiClient:
    base_url = os.getenv("SWEETSHOP_API_URL", "").strip()
    email = os.getenv("SWEETSHOP_API_EMAIL", "").strip()
    password = os.getenv("SWEETSHOP_API_PASSWORD", "").strip()
    token = os.getenv("SWEETSHOP_API_TOKEN", "").strip() or None

    if not base_url:
        raise RuntimeError("Missing SWEETSHOP_API_URL")
    if not email:
        raise RuntimeError("Missing SWEETSHOP_API_EMAIL")
    if not password:
        raise RuntimeError("Missing SWEETSHOP_API_PASSWORD")

    return SweetShopApiClient(base_url=base_url, email=email, password=password, token=token)


if __name__ == "__main__":
    client = make_client_from_env()
    for sweet in client.list_sweets():
        print(f"{sweet['id']}  {sweet['name']:<30} {sweet['category']:<12} qty={sweet['quantity']}")
