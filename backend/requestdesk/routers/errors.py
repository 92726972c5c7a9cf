"""Error payloads shared by the routers"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from requestdesk.models import FieldError, field_errors


def validation_error_response(errors: list[FieldError]) -> JSONResponse:
    """400 response listing every field problem."""
    return JSONResponse(status_code=400, content={"errors": [e.to_dict() for e in errors]})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body validation failures as field errors named like the JSON keys."""
    errors = []
    for err in exc.errors():
        loc = tuple(err.get("loc", ()))
        if loc[:1] == ("body",):
            loc = loc[1:]
        errors.append({**err, "loc": loc})
    return validation_error_response(field_errors(errors))
