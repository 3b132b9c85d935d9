"""
Health and readiness checks: database and artefact storage.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from cath.core.config import settings
from cath.core.logger import logger
from cath.db.database import get_db

router = APIRouter()


def _check_database(db: Session) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        db.execute(text("SELECT 1"))
        return "ok", "Database reachable"
    except Exception as e:
        logger.exception("Database check failed")
        return "error", f"Database: {str(e)}"


def _check_storage() -> tuple[str, str]:
    if settings.STORAGE_BACKEND != "s3":
        return "ok", f"Local storage at '{settings.STORAGE_PATH}'"
    try:
        import boto3
        from botocore.exceptions import ClientError

        client = boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        )
        bucket = settings.S3_BUCKET_NAME
        client.head_bucket(Bucket=bucket)
        return "ok", f"Bucket '{bucket}' accessible"
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        return "error", f"S3: {code} - {str(e)}"


@router.get("")
def health_check():
    return {"status": "healthy"}


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    """
    - database: SELECT 1
    - storage: head_bucket when STORAGE_BACKEND is s3
    """
    db_status, db_detail = _check_database(db)
    storage_status, storage_detail = _check_storage()

    healthy = db_status == "ok" and storage_status == "ok"
    return {
        "status": "healthy" if healthy else "degraded",
        "database": {"status": db_status, "detail": db_detail},
        "storage": {"status": storage_status, "detail": storage_detail},
    }
