import hashlib
import json
from typing import Any

from fastapi import Request, Response

from utils.hateoas import HALResponse, Resource


def generate_etag(data: Any) -> str:
    """
    Generate an ETag from the representation a client would receive.

    Hashing the HAL document (fields and links) means the tag changes when a
    field changes and also when a linked route moves.
    """
    if isinstance(data, Resource):
        content = json.dumps(data.to_hal(), sort_keys=True, separators=(",", ":"))
    else:
        content = str(data)

    etag_hash = hashlib.md5(content.encode('utf-8')).hexdigest()
    return f'"{etag_hash}"'


def _opaque_tag(etag: str) -> str:
    # If-None-Match uses weak comparison: W/"x" matches "x"
    etag = etag.strip()
    return etag[2:] if etag.startswith('W/') else etag


def check_etag_match(request: Request, current_etag: str) -> bool:
    """True when If-None-Match names the current tag, weak or strong (or "*")."""
    if_none_match = request.headers.get('if-none-match')
    if not if_none_match:
        return False

    client_etags = [_opaque_tag(etag) for etag in if_none_match.split(',')]

    return '*' in client_etags or _opaque_tag(current_etag) in client_etags


def set_etag_headers(response: Response, etag: str) -> None:
    """
    Set ETag and Cache-Control headers on the response.
    """
    response.headers['ETag'] = etag
    response.headers['Cache-Control'] = 'private, max-age=0, must-revalidate'


def handle_conditional_request(request: Request, data: Any) -> tuple[str, bool]:
    """
    Handle conditional requests with ETag support.

    Returns:
        tuple: (etag, should_return_304)
    """
    current_etag = generate_etag(data)
    return current_etag, check_etag_match(request, current_etag)


def conditional_hal_response(request: Request, resource: Resource) -> Response:
    """HAL document with ETag headers, or an empty 304 when the client's copy is current."""
    etag, not_modified = handle_conditional_request(request, resource)
    if not_modified:
        response = Response(status_code=304)
    else:
        response = HALResponse(resource.to_hal())
    set_etag_headers(response, etag)
    return response
