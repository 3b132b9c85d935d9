# cath/services/flat_file_service.py

"""
Lookup and download metadata for flat-file publications (PDF, Word, HTML,
CSV and so on) as opposed to JSON lists rendered by the service.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from cath.db.models import Artefact, Language
from cath.list_types.registry import get_list_type, get_list_type_name
from cath.services import file_storage
from cath.services.artefact_service import get_artefact_by_id, is_artefact_live
from cath.services.location_service import get_location_by_id, location_display_name
from cath.utils.exceptions import FlatFileError
from cath.utils.helpers import format_date

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
    "html": "text/html",
    "htm": "text/html",
    "csv": "text/csv",
    "json": "application/json",
}

LANGUAGE_LABELS = {
    Language.ENGLISH: "English (Saesneg)",
    Language.WELSH: "Welsh (Cymraeg)",
    Language.BILINGUAL: "Bilingual (Dwyieithog)",
}


@dataclass
class FlatFile:
    artefact_id: str
    data: bytes
    file_name: str
    content_type: str
    artefact: Artefact


@dataclass
class FlatFileDisplay:
    artefact_id: str
    court_name: str
    list_type_name: str
    content_date: datetime
    language: Language
    file_extension: str


def get_content_type(extension: Optional[str]) -> str:
    if not extension:
        return "application/pdf"
    return CONTENT_TYPES.get(extension.lower().lstrip("."), "application/octet-stream")


def _file_extension(file_name: str) -> str:
    return "." + file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""


def _load_flat_artefact(db: Session, artefact_id: str, location_id=None) -> Artefact:
    artefact = get_artefact_by_id(db, artefact_id)
    if artefact is None:
        raise FlatFileError(FlatFileError.NOT_FOUND, "Artefact not found")
    if location_id is not None and str(artefact.location_id) != str(location_id):
        raise FlatFileError(FlatFileError.LOCATION_MISMATCH, "Artefact does not belong to this location")
    if not artefact.is_flat_file:
        raise FlatFileError(FlatFileError.NOT_FLAT_FILE, "Not a flat file")
    if not is_artefact_live(artefact):
        raise FlatFileError(FlatFileError.EXPIRED, "File has expired")
    return artefact


def get_flat_file(db: Session, artefact_id: str) -> FlatFile:
    """Raises FlatFileError with NOT_FOUND, NOT_FLAT_FILE, EXPIRED or FILE_NOT_FOUND."""
    artefact = _load_flat_artefact(db, artefact_id)
    stored = file_storage.get_file(str(artefact.artefact_id))
    if stored is None:
        raise FlatFileError(FlatFileError.FILE_NOT_FOUND, "File not found in storage")

    data, file_name = stored
    return FlatFile(
        artefact_id=str(artefact.artefact_id),
        data=data,
        file_name=file_name,
        content_type=get_content_type(_file_extension(file_name)),
        artefact=artefact,
    )


def get_flat_file_for_display(db: Session, artefact_id: str, location_id, locale: str = "en") -> FlatFileDisplay:
    artefact = _load_flat_artefact(db, artefact_id, location_id=location_id)
    stored = file_storage.get_file(str(artefact.artefact_id))
    if stored is None:
        raise FlatFileError(FlatFileError.FILE_NOT_FOUND, "File not found in storage")

    location = get_location_by_id(db, artefact.location_id)
    list_type = get_list_type(artefact.list_type_id)
    if list_type is None:
        list_type_name = get_list_type_name(artefact.list_type_id)
    else:
        list_type_name = list_type.welsh_friendly_name if locale == "cy" else list_type.english_friendly_name

    return FlatFileDisplay(
        artefact_id=str(artefact.artefact_id),
        court_name=location_display_name(location, locale) if location else "",
        list_type_name=list_type_name,
        content_date=artefact.content_date,
        language=artefact.language,
        file_extension=_file_extension(stored[1]),
    )


def build_download_filename(
    list_type_id: int,
    content_date: Union[date, datetime],
    language: Language,
    extension: str,
    locale: str = "en",
) -> str:
    """e.g. "Magistrates Public List 23 October 2025 English (Saesneg).pdf" """
    list_type = get_list_type(list_type_id)
    if list_type is None:
        name = get_list_type_name(list_type_id)
    else:
        name = list_type.welsh_friendly_name if locale == "cy" else list_type.english_friendly_name

    language_label = LANGUAGE_LABELS.get(Language(language), str(language))
    ext = extension if not extension or extension.startswith(".") else f".{extension}"
    return f"{name} {format_date(content_date, locale)} {language_label}{ext}"
