"""FastAPI routes wrapped with enterprise-errors.

FastAPI has no ``request.error`` hook, so the report hook turns the
external error view into a JSONResponse and the wrapper returns it.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from enterprise_errors import (
    ErrorResponse,
    ErrorService,
    ErrorServiceConfig,
    HttpEmailTransport,
    RequestSnapshot,
    validation_error,
)

logging.basicConfig(level=logging.INFO)

app = FastAPI()
mail = HttpEmailTransport("https://mail-relay.internal/send")
errors = ErrorService(
    ErrorServiceConfig(
        database_type="sqlite",
        database_name="errors.db",
        table_name="ERRORLOGS",
        module="orders",
        environment="DEV",
        mail_to=["ops@example.com"],
    ),
    send_email=mail,
)


def to_json_response(request: Request, response: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status, content=response.model_dump(mode="json", exclude_none=True))


def snapshot(request: Request) -> RequestSnapshot:
    return RequestSnapshot(
        user=getattr(request.state, "user", None),
        event=request.scope.get("endpoint").__name__ if request.scope.get("endpoint") else None,
        method=request.method,
        url=str(request.url),
        headers=dict(request.headers),
    )


@app.post("/orders")
@errors.handle_errors(report=to_json_response, snapshot=snapshot)
async def create_order(request: Request):
    payload = await request.json()
    if not payload.get("email"):
        raise validation_error("Email is required", target="email")
    return {"status": "created"}


@app.get("/orders/{order_id}/total")
@errors.handle_errors(report=to_json_response, snapshot=snapshot)
async def order_total(request: Request):
    # Raises TypeError -> 500 RUNTIME_ERR
    return {"total": request.path_params["order_id"] + 1}


@app.on_event("shutdown")
async def shutdown():
    await errors.close()
    await mail.close()
