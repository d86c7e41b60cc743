"""Extraction of bulk import parameters from the incoming request.

Three body shapes are accepted:

- ``multipart/form-data``: ``file`` upload plus ``mode``, ``duplicateAction``
  and ``importedBy`` form fields.
- ``application/json``: ``csvData`` (or ``csv``), ``mode``,
  ``duplicateAction`` and ``importedBy``.
- Anything else: the raw body is the CSV text and ``mode`` comes from the
  query string.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Request

from app.imports.exceptions import ImportInputError
from app.imports.schemas import DuplicateAction, ImportMode


@dataclass
class ImportRequest:
    csv_text: str
    mode: ImportMode = ImportMode.PREVIEW
    duplicate_action: DuplicateAction = DuplicateAction.SKIP
    imported_by: str | None = None


def parse_mode(value: Any) -> ImportMode:
    """Map the ``mode`` field onto ``ImportMode``; absent means preview.

    Raises:
        ImportInputError: For any other value, so a typo never silently
            degrades a commit into a preview.
    """
    if value is None or str(value).strip() == "":
        return ImportMode.PREVIEW
    try:
        return ImportMode(str(value).strip().lower())
    except ValueError:
        raise ImportInputError(
            "Invalid mode",
            message=f"mode must be one of: {', '.join(m.value for m in ImportMode)}",
            mode=str(value),
        )


def parse_duplicate_action(value: Any) -> DuplicateAction:
    """Map ``duplicateAction`` onto ``DuplicateAction``; absent means skip."""
    if value is None or str(value).strip() == "":
        return DuplicateAction.SKIP
    text = str(value).strip().lower()
    for action in DuplicateAction:
        if action.value.lower() == text:
            return action
    raise ImportInputError(
        "Invalid duplicateAction",
        message=f"duplicateAction must be one of: {', '.join(a.value for a in DuplicateAction)}",
        duplicateAction=str(value),
    )


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ImportInputError("CSV data must be UTF-8 text")


def _text_field(source: Any, name: str) -> str | None:
    """Return ``source[name]`` if it is text; absent means None.

    Raises:
        ImportInputError: If the field holds anything other than a string,
            such as a JSON list or object or an uploaded file.
    """
    value = source.get(name)
    if value is None or isinstance(value, str):
        return value
    raise ImportInputError(f"{name} must be a string", field=name)


async def read_import_request(request: Request) -> ImportRequest:
    """Read CSV text and import options from any accepted body shape."""
    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        form = await request.form()
        upload = form.get("file")
        if upload is None:
            csv_text = ""
        elif isinstance(upload, str):
            csv_text = upload
        else:
            csv_text = _decode(await upload.read())
        return ImportRequest(
            csv_text=csv_text,
            mode=parse_mode(_text_field(form, "mode")),
            duplicate_action=parse_duplicate_action(_text_field(form, "duplicateAction")),
            imported_by=_text_field(form, "importedBy") or None,
        )

    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            raise ImportInputError("Invalid JSON body")
        if not isinstance(body, dict):
            raise ImportInputError("Invalid JSON body")
        return ImportRequest(
            csv_text=_text_field(body, "csvData") or _text_field(body, "csv") or "",
            mode=parse_mode(_text_field(body, "mode")),
            duplicate_action=parse_duplicate_action(_text_field(body, "duplicateAction")),
            imported_by=_text_field(body, "importedBy") or None,
        )

    return ImportRequest(
        csv_text=_decode(await request.body()),
        mode=parse_mode(request.query_params.get("mode")),
    )
