"""This module converts App resources to and from their wire forms.

Two media types are spoken in both directions:

1.  JSON   {"id": "1", "label": "...", "description": "..."}
2.  XML    <App><Id>1</Id><Label>...</Label><Description>...</Description></App>

Request bodies distinguish a field which was not sent (missing key,  JSON
null,  missing XML element) from one sent empty ("" or <Label/>),  see
appstore.types.Present and ABSENT.
"""

import json
import xml.etree.ElementTree as ET

from werkzeug.datastructures import MIMEAccept
from werkzeug.http import parse_accept_header

from appstore.types import App, AppId, AppUpdateRequest, Present, ABSENT
from appstore.errors import DecodeError, UnsupportedMediaTypeError, NotAcceptableError

# -------------------------------------------------------------------------------------

MIME_JSON = "application/json"
MIME_XML = "application/xml"
MIME_TEXT_XML = "text/xml"

CONSUMES = [MIME_JSON, MIME_XML, MIME_TEXT_XML]
PRODUCES = [MIME_JSON, MIME_XML, MIME_TEXT_XML]

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

REQUEST_FIELDS = ("label", "description")

# -------------------------------------------------------------------------------------
#                                content negotiation
# -------------------------------------------------------------------------------------


def parse_accept(header: str | None) -> MIMEAccept:
    return parse_accept_header(header, MIMEAccept)


def negotiate(accept: MIMEAccept | str | None) -> str:
    """Return the response media type for an Accept header.  An empty header
    means JSON.  NotAcceptableError if neither JSON nor XML is acceptable.
    """
    if accept is None or isinstance(accept, str):
        accept = parse_accept(accept)
    if not accept:
        return MIME_JSON
    mimetype = accept.best_match(PRODUCES)
    if mimetype is None:
        raise NotAcceptableError(
            f"Acceptable media types are {', '.join(PRODUCES)}."
        )
    return mimetype


def request_format(mimetype: str | None) -> str:
    """Classify a request Content-Type as MIME_JSON or MIME_XML.  No
    Content-Type at all is treated as JSON.
    """
    mimetype = (mimetype or "").split(";")[0].strip().lower()
    if not mimetype or mimetype == MIME_JSON or mimetype.endswith("+json"):
        return MIME_JSON
    if mimetype in (MIME_XML, MIME_TEXT_XML) or mimetype.endswith("+xml"):
        return MIME_XML
    raise UnsupportedMediaTypeError(
        f"Unsupported Content-Type {mimetype}, use one of {', '.join(CONSUMES)}."
    )


# -------------------------------------------------------------------------------------
#                                decoding
# -------------------------------------------------------------------------------------


def decode_request(body: bytes | str, mimetype: str | None) -> AppUpdateRequest:
    """Decode a POST/PUT/PATCH body of the given Content-Type."""
    if request_format(mimetype) == MIME_XML:
        return decode_xml(body)
    return decode_json(body)


def decode_json(body: bytes | str) -> AppUpdateRequest:
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        data = json.loads(body)
    except ValueError as e:  # includes JSONDecodeError and UnicodeDecodeError
        raise DecodeError(f"Invalid JSON body: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError("JSON body must be an object.")
    fields = {}
    # Keys match case-insensitively,  the last spelling of a key wins.
    for key, value in data.items():
        name = key.lower()
        if name not in REQUEST_FIELDS:
            continue
        if value is None:
            fields[name] = ABSENT
        elif isinstance(value, str):
            fields[name] = Present(value)
        else:
            raise DecodeError(
                f"JSON field {key!r} must be a string, not {type(value).__name__}."
            )
    return AppUpdateRequest(**fields)


def decode_xml(body: bytes | str) -> AppUpdateRequest:
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise DecodeError(f"Invalid XML body: {e}") from e
    fields = {}
    for child in root:
        name = child.tag.lower()
        if name in REQUEST_FIELDS:
            fields[name] = Present(child.text or "")
    return AppUpdateRequest(**fields)


# -------------------------------------------------------------------------------------
#                                encoding
# -------------------------------------------------------------------------------------


def encode_app(app: App, mimetype: str = MIME_JSON) -> str:
    """Encode `app` for a response of the negotiated media type."""
    if mimetype in (MIME_XML, MIME_TEXT_XML):
        return encode_xml(app)
    return encode_json(app)


def encode_json(app: App) -> str:
    return json.dumps(app.to_dict())


def encode_xml(app: App) -> str:
    root = ET.Element("App")
    ET.SubElement(root, "Id").text = str(app.id)
    ET.SubElement(root, "Label").text = app.label
    ET.SubElement(root, "Description").text = app.description
    return XML_HEADER + ET.tostring(root, encoding="unicode")


def decode_app(body: bytes | str, mimetype: str = MIME_JSON) -> App:
    """Decode an App response body,  used by the client and tests."""
    if request_format(mimetype) == MIME_XML:
        root = ET.fromstring(body.encode("utf-8") if isinstance(body, str) else body)
        values = {child.tag.lower(): child.text or "" for child in root}
    else:
        values = json.loads(body)
    return App(
        id=AppId(values["id"]),
        label=values["label"],
        description=values["description"],
    )
