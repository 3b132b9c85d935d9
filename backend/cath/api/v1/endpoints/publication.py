"""
Publication ingestion API used by upstream list publishers.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cath.api.v1.deps import verify_api_token
from cath.core.logger import logger
from cath.db.database import get_db
from cath.db.schemas import PublicationCreate, PublicationResponse
from cath.list_types.registry import get_list_type, validate_list_json
from cath.services.location_service import get_location_by_id
from cath.services.publication_service import create_publication, run_publication_processing

router = APIRouter()


@router.post(
    "",
    response_model=PublicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a hearing list",
)
def publish(
    publication: PublicationCreate,
    background_tasks: BackgroundTasks,
    token: dict = Depends(verify_api_token),
    db: Session = Depends(get_db),
) -> PublicationResponse:
    """
    Store a JSON (or flat file metadata) publication. An unknown location is
    accepted and flagged with noMatch; subscribers are only notified for
    known locations.
    """
    list_type = get_list_type(publication.listTypeId)
    if list_type is None:
        raise HTTPException(status_code=400, detail=f"Invalid list type: {publication.listTypeId}")

    if publication.payload is not None:
        schema_errors = validate_list_json(list_type.id, publication.payload)
        if schema_errors:
            raise HTTPException(status_code=400, detail={"errors": schema_errors})

    no_match = get_location_by_id(db, publication.locationId) is None
    result = create_publication(
        db,
        {
            "locationId": publication.locationId,
            "listTypeId": list_type.id,
            "contentDate": publication.contentDate,
            "sensitivity": publication.sensitivity,
            "language": publication.language,
            "displayFrom": publication.displayFrom,
            "displayTo": publication.displayTo,
            "isFlatFile": publication.isFlatFile,
            "provenance": publication.provenance,
            "noMatch": no_match,
            "sourceFileName": publication.fileName,
        },
        json_data=publication.payload,
    )

    logger.info(
        "API publication %s from %s (noMatch=%s)", result["artefactId"], token.get("sub"), no_match
    )
    if not no_match:
        background_tasks.add_task(run_publication_processing, result["artefactId"], result["jsonData"])

    return PublicationResponse(artefactId=result["artefactId"], noMatch=no_match)
