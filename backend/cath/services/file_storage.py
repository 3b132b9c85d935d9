# cath/services/file_storage.py

"""
Published file storage keyed by artefact id.

Files are stored as <artefactId><ext>. A non-strategic upload keeps both the
original spreadsheet and the converted <artefactId>.json side by side.
"""
import os
from pathlib import Path
from typing import List, Optional, Tuple

import boto3
from botocore.exceptions import ClientError

from cath.core.config import settings
from cath.core.logger import logger
from cath.utils.validators import validate_artefact_id


def _extension(file_name: str) -> str:
    return os.path.splitext(file_name or "")[1].lower()


def _pick(names: List[str], ext: Optional[str]) -> Optional[str]:
    """Exact extension when asked for one; otherwise prefer the uploaded file over its JSON twin."""
    if not names:
        return None
    if ext is not None:
        wanted = ext if ext.startswith(".") else f".{ext}"
        return next((n for n in names if _extension(n) == wanted.lower()), None)
    non_json = [n for n in sorted(names) if _extension(n) != ".json"]
    return non_json[0] if non_json else sorted(names)[0]


class LocalFileStorage:
    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()

    def _path_for(self, name: str) -> Path:
        path = (self.base_path / name).resolve()
        if path.parent != self.base_path:
            raise ValueError("Invalid file path: path traversal detected")
        return path

    def _names(self, artefact_id: str) -> List[str]:
        if not self.base_path.exists():
            return []
        return [p.name for p in self.base_path.glob(f"{artefact_id}.*") if p.is_file()]

    def save_file(self, artefact_id: str, file_name: str, data: bytes) -> str:
        validate_artefact_id(artefact_id)
        self.base_path.mkdir(parents=True, exist_ok=True)
        stored_name = f"{artefact_id}{_extension(file_name)}"
        self._path_for(stored_name).write_bytes(data)
        logger.info("Stored artefact file %s", stored_name)
        return stored_name

    def get_file(self, artefact_id: str, ext: Optional[str] = None) -> Optional[Tuple[bytes, str]]:
        validate_artefact_id(artefact_id)
        name = _pick(self._names(artefact_id), ext)
        if name is None:
            return None
        return self._path_for(name).read_bytes(), name

    def delete_files(self, artefact_id: str) -> int:
        validate_artefact_id(artefact_id)
        removed = 0
        for name in self._names(artefact_id):
            self._path_for(name).unlink(missing_ok=True)
            removed += 1
        return removed


class S3FileStorage:
    """
    Same contract on top of S3, objects under <S3_PREFIX>/<artefactId><ext>.
    """

    def __init__(self):
        self.s3_client = boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None
        )
        self.bucket = settings.S3_BUCKET_NAME
        self.prefix = settings.S3_PREFIX.strip("/")

    def _key(self, name: str) -> str:
        return f"{self.prefix}/{name}" if self.prefix else name

    def _names(self, artefact_id: str) -> List[str]:
        response = self.s3_client.list_objects_v2(Bucket=self.bucket, Prefix=self._key(f"{artefact_id}."))
        return [obj["Key"].rsplit("/", 1)[-1] for obj in response.get("Contents", [])]

    def save_file(self, artefact_id: str, file_name: str, data: bytes) -> str:
        validate_artefact_id(artefact_id)
        stored_name = f"{artefact_id}{_extension(file_name)}"
        try:
            self.s3_client.put_object(Bucket=self.bucket, Key=self._key(stored_name), Body=data)
        except ClientError as e:
            logger.error(f"Failed to upload {stored_name} to S3: {str(e)}")
            raise
        logger.info(f"Uploaded artefact file to S3: {stored_name}")
        return stored_name

    def get_file(self, artefact_id: str, ext: Optional[str] = None) -> Optional[Tuple[bytes, str]]:
        validate_artefact_id(artefact_id)
        try:
            name = _pick(self._names(artefact_id), ext)
            if name is None:
                return None
            obj = self.s3_client.get_object(Bucket=self.bucket, Key=self._key(name))
            return obj["Body"].read(), name
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("NoSuchKey", "404"):
                return None
            logger.error(f"Failed to read artefact {artefact_id} from S3: {str(e)}")
            raise

    def delete_files(self, artefact_id: str) -> int:
        validate_artefact_id(artefact_id)
        names = self._names(artefact_id)
        for name in names:
            self.s3_client.delete_object(Bucket=self.bucket, Key=self._key(name))
        return len(names)


_s3_storage: Optional[S3FileStorage] = None


def get_storage():
    """Backend selected by STORAGE_BACKEND."""
    global _s3_storage
    if settings.STORAGE_BACKEND == "s3":
        if _s3_storage is None:
            _s3_storage = S3FileStorage()
        return _s3_storage
    return LocalFileStorage(settings.STORAGE_PATH)


def save_file(artefact_id: str, file_name: str, data: bytes) -> str:
    return get_storage().save_file(artefact_id, file_name, data)


def get_file(artefact_id: str, ext: Optional[str] = None) -> Optional[Tuple[bytes, str]]:
    return get_storage().get_file(artefact_id, ext)


def delete_files(artefact_id: str) -> int:
    return get_storage().delete_files(artefact_id)
