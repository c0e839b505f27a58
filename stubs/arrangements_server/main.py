"""
In-memory stand-in for the agency's arrangement options API.

The bearer token doubles as the tenant id. Tests mount `create_app()`
through httpx's ASGI transport.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Header, HTTPException, Request


def _tenant_from(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="No token provided")
    return authorization.removeprefix("Bearer ").strip()


def seed_plan(app: FastAPI, tenant_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
    """Store a raw record as-is under a tenant, e.g. a row in an older shape"""
    stored = {"id": str(uuid.uuid4()), **record}
    app.state.plans.setdefault(tenant_id, {})[stored["id"]] = stored
    return stored


def create_app() -> FastAPI:
    app = FastAPI(title="Mock Arrangement Options API", version="1.0.0")
    app.state.plans = {}  # tenant id -> plan id -> record

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/arrangement-options")
    def list_options(authorization: str | None = Header(None)):
        tenant_id = _tenant_from(authorization)
        return list(app.state.plans.get(tenant_id, {}).values())

    @app.post("/api/arrangement-options", status_code=201)
    async def create_option(request: Request, authorization: str | None = Header(None)):
        tenant_id = _tenant_from(authorization)
        body = await request.json()
        if not body.get("name") or body.get("minBalance") is None:
            raise HTTPException(status_code=400, detail="Missing required fields")

        record = {
            **body,
            "id": str(uuid.uuid4()),
            "tenantId": tenant_id,
            "isActive": True,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        app.state.plans.setdefault(tenant_id, {})[record["id"]] = record
        return record

    @app.get("/api/arrangement-options/{option_id}")
    def get_option(option_id: str, authorization: str | None = Header(None)):
        tenant_id = _tenant_from(authorization)
        record = app.state.plans.get(tenant_id, {}).get(option_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Arrangement option not found")
        return record

    @app.delete("/api/arrangement-options/{option_id}")
    def delete_option(option_id: str, authorization: str | None = Header(None)):
        tenant_id = _tenant_from(authorization)
        if app.state.plans.get(tenant_id, {}).pop(option_id, None) is None:
            raise HTTPException(status_code=404, detail="Arrangement option not found")
        return {"success": True}

    return app


app = create_app()
