import json
from typing import Annotated, List, Optional

from fastapi import Depends, HTTPException, Path, Request, status
from pydantic import ValidationError

from .db import get_repository
from .errors import NotFoundError, QueryError
from .repository import ProductRepository
from .schemas import DeleteAllResult, Message, ProductIn, ProductOut

EMPTY_BODY = "Content can not be empty!"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# ids outside the BIGINT range never match a row and overflow some drivers
ProductId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]

async def read_product_body(request: Request) -> Optional[ProductIn]:
    """
    Parse a JSON or URL-encoded body into ProductIn.
    Returns None when there is no body, or it is an empty object.
    Any other content type is rejected with 415.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPE):
        data = dict(await request.form())
    elif not content_type or content_type.startswith("application/json"):
        try:
            data = json.loads(raw)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
    else:
        media_type = content_type.split(";")[0].strip()
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported media type: {media_type}",
        )
    if not data:
        return None
    if not isinstance(data, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Body must be an object")
    try:
        return ProductIn.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in e.errors())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid fields: {fields}")

def _not_found(product_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Product with id {product_id} not found.")

def create(
    payload: Optional[ProductIn] = Depends(read_product_body),
    repo: ProductRepository = Depends(get_repository),
) -> ProductOut:
    if payload is None:
        raise HTTPException(status_code=400, detail=EMPTY_BODY)
    try:
        return repo.create(payload)
    except QueryError as e:
        raise HTTPException(status_code=500, detail=e.message or "Some error occurred while creating the Product.")

def find_all(name: Optional[str] = None, repo: ProductRepository = Depends(get_repository)) -> List[ProductOut]:
    try:
        return repo.get_all(name)
    except QueryError as e:
        raise HTTPException(status_code=500, detail=e.message or "Some error occurred while retrieving products.")

def find_one(id: ProductId, repo: ProductRepository = Depends(get_repository)) -> ProductOut:
    try:
        return repo.find_by_id(id)
    except NotFoundError:
        raise _not_found(id)
    except QueryError:
        raise HTTPException(status_code=500, detail=f"Error retrieving product with id {id}")

def update(
    id: ProductId,
    payload: Optional[ProductIn] = Depends(read_product_body),
    repo: ProductRepository = Depends(get_repository),
) -> ProductOut:
    if payload is None:
        raise HTTPException(status_code=400, detail=EMPTY_BODY)
    try:
        return repo.update_by_id(id, payload)
    except NotFoundError:
        raise _not_found(id)
    except QueryError:
        raise HTTPException(status_code=500, detail=f"Error updating product with id {id}")

def delete(id: ProductId, repo: ProductRepository = Depends(get_repository)) -> Message:
    try:
        repo.remove(id)
    except NotFoundError:
        raise _not_found(id)
    except QueryError:
        raise HTTPException(status_code=500, detail=f"Could not delete product with id {id}")
    return Message(message="Product was deleted successfully!")

def delete_all(repo: ProductRepository = Depends(get_repository)) -> DeleteAllResult:
    try:
        deleted = repo.remove_all()
    except QueryError as e:
        raise HTTPException(status_code=500, detail=e.message or "Some error occurred while removing all products.")
    return DeleteAllResult(message="All products were deleted successfully!", deleted=deleted)
