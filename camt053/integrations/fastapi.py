from fastapi import HTTPException, Request

from camt053.exceptions import DecodingError, InvalidMessageError
from camt053.integrations.pydantic import PydanticMessage, from_message
from camt053.message import Message


async def get_camt053_message(request: Request) -> PydanticMessage:
    """
    FastAPI dependency that validates and decodes a camt.053 request body
    and returns it as a Pydantic model.
    """
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Empty payload")

    try:
        message = Message.from_bytes(body)
    except InvalidMessageError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Schema validation failed", "errors": e.errors},
        )

    try:
        return from_message(message)
    except DecodingError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": "Decoding failed", "field": e.field, "location": e.location, "error": str(e)},
        )
