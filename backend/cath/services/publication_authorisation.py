# cath/services/publication_authorisation.py

"""
Who may see a publication.

Sensitivity decides the audience:
  PUBLIC      everyone, signed in or not
  PRIVATE     any verified user (IDAM-provenance account)
  CLASSIFIED  verified users whose provenance matches the list type's
System admins see everything. CTSC and local admins only ever see PUBLIC
lists. A missing sensitivity is treated as CLASSIFIED.
"""
from typing import List, Optional

from cath.db.models import Artefact, Sensitivity, UserProvenance, UserRole
from cath.list_types.registry import ListTypeDef, get_list_type

VERIFIED_PROVENANCES = {
    UserProvenance.B2C_IDAM.value,
    UserProvenance.CFT_IDAM.value,
    UserProvenance.CRIME_IDAM.value,
}
METADATA_ONLY_ROLES = {UserRole.INTERNAL_ADMIN_CTSC.value, UserRole.INTERNAL_ADMIN_LOCAL.value}


def _sensitivity(artefact: Artefact) -> Sensitivity:
    if not artefact.sensitivity:
        return Sensitivity.CLASSIFIED
    try:
        return Sensitivity(artefact.sensitivity)
    except ValueError:
        return Sensitivity.CLASSIFIED


def _role(user: Optional[dict]) -> Optional[str]:
    return user.get("role") if user else None


def _is_verified(user: dict) -> bool:
    return user.get("provenance") in VERIFIED_PROVENANCES


def can_access_publication(user: Optional[dict], artefact: Artefact, list_type: Optional[ListTypeDef] = None) -> bool:
    if _role(user) == UserRole.SYSTEM_ADMIN.value:
        return True

    sensitivity = _sensitivity(artefact)
    if sensitivity == Sensitivity.PUBLIC:
        return True
    if not user:
        return False

    if sensitivity == Sensitivity.PRIVATE:
        return _is_verified(user)

    if not _is_verified(user):
        return False
    # fail closed when the list type is unknown
    list_type = list_type or get_list_type(artefact.list_type_id)
    if list_type is None:
        return False
    return user.get("provenance") == list_type.provenance


def can_access_publication_data(
    user: Optional[dict], artefact: Artefact, list_type: Optional[ListTypeDef] = None
) -> bool:
    """Hearing list content and file downloads"""
    if _role(user) in METADATA_ONLY_ROLES and _sensitivity(artefact) != Sensitivity.PUBLIC:
        return False
    return can_access_publication(user, artefact, list_type)


def can_access_publication_metadata(
    user: Optional[dict], artefact: Artefact, list_type: Optional[ListTypeDef] = None
) -> bool:
    """Whether the publication may be listed on the summary page"""
    role = _role(user)
    if role == UserRole.SYSTEM_ADMIN.value:
        return True
    if role in METADATA_ONLY_ROLES:
        return _sensitivity(artefact) == Sensitivity.PUBLIC
    return can_access_publication(user, artefact, list_type)


def filter_publications_for_summary(user: Optional[dict], artefacts: List[Artefact]) -> List[Artefact]:
    return [artefact for artefact in artefacts if can_access_publication_metadata(user, artefact)]
