"""
Normalization of upstream spreadsheet rows into canonical records.

The sheet's header row is edited by hand, so the same logical column
shows up under different names (English, Korean, with or without
spaces). Each canonical field has a priority-ordered list of accepted
headers; the first one carrying a non-empty value wins. Columns that
match no alias are kept under a slug of their header.
"""
import re
from typing import Any, Optional

from vault.models.favorite import Favorite
from vault.models.member import Member
from vault.models.service import ServiceRecord


SERVICE_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "service_name": ("사이트명", "serviceName", "service_name"),
    "url": ("url", "URL"),
    "account_id": ("accountId", "계정", "아이디", "ID"),
    "password": ("password", "PW", "비밀번호"),
    "password_kr": ("PW(한글)",),
    "usage": ("usage", "용도", "비고"),
    "last_modified": ("lastModified", "최종수정일", "최종 수정일"),
    "editor": ("편집자",),
    "registrant": ("계정가입자/본인인증",),
    "verified": ("확인",),
}

MEMBER_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "email": ("email", "이메일"),
    "group": ("group", "그룹", "팀"),
}

FAVORITE_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "email": ("email",),
    "service_id": ("serviceId", "service_id"),
    "service_name": ("serviceName", "service_name"),
    "created_at": ("createdAt", "created_at"),
}

_WHITESPACE = re.compile(r"\s+")


def to_text(value: Any) -> str:
    """Coerce any sheet cell value to a string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(v) for v in value)
    return str(value)


def slugify_header(header: str) -> str:
    """'Two Factor  Method' -> 'two_factor_method'"""
    return _WHITESPACE.sub("_", header.strip().lower())


def _pick(row: dict[str, Any], aliases: tuple[str, ...]) -> str:
    for header in aliases:
        text = to_text(row.get(header))
        if text:
            return text
    return ""


def _apply_aliases(
    row: dict[str, Any],
    aliases: dict[str, tuple[str, ...]],
) -> tuple[dict[str, str], dict[str, str]]:
    """Split a raw row into (canonical fields, leftover fields)."""
    canonical = {field: _pick(row, headers) for field, headers in aliases.items()}

    known = {header for headers in aliases.values() for header in headers}
    extra: dict[str, str] = {}
    for header, value in row.items():
        if header in known:
            continue
        key = slugify_header(str(header))
        if key and key not in extra:
            extra[key] = to_text(value)
    return canonical, extra


def normalize_service(row: dict[str, Any], position: Optional[int] = None) -> ServiceRecord:
    """
    Map one raw sheet row to a ServiceRecord.

    Args:
        row: Raw header -> cell mapping
        position: 1-based row position, used when the row carries no id

    Returns:
        Canonical ServiceRecord
    """
    fields, extra = _apply_aliases(row, SERVICE_FIELD_ALIASES)
    if not fields["id"] and position is not None:
        fields["id"] = f"service-{position}"
    return ServiceRecord(**fields, extra_fields=extra)


def normalize_services(rows: list[dict[str, Any]]) -> list[ServiceRecord]:
    return [normalize_service(row, position) for position, row in enumerate(rows, start=1)]


def normalize_member(row: dict[str, Any]) -> Optional[Member]:
    fields, _ = _apply_aliases(row, MEMBER_FIELD_ALIASES)
    if not fields["email"] or not fields["group"]:
        return None
    return Member(email=fields["email"].strip(), group=fields["group"].strip())


def normalize_favorite(row: dict[str, Any]) -> Optional[Favorite]:
    fields, _ = _apply_aliases(row, FAVORITE_FIELD_ALIASES)
    if not fields["email"] or not fields["service_id"]:
        return None
    fields["email"] = fields["email"].lower()
    return Favorite(**fields)
