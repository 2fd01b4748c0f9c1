### formstamp/templates/storage.py

# Standard library imports
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

# Third party imports
import boto3
from botocore.exceptions import ClientError
from fastapi import Depends

# Local imports
from formstamp.core.config import Settings, get_settings
from formstamp.templates.exceptions import TemplateFileMissingException
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


class TemplateStore(ABC):
    """
    Byte storage for uploaded templates, addressed by an opaque key.
    Methods are blocking; async callers wrap them in asyncio.to_thread.
    """

    def __init__(self, prefix: str = "templates"):
        self.prefix = prefix.strip("/")

    def new_key(self, filename: Optional[str] = None) -> str:
        """Key for a new upload, unique regardless of the original name"""
        extension = os.path.splitext(filename or "")[1].lower() or ".pdf"
        return f"{self.prefix}/{uuid.uuid4().hex}{extension}"

    @abstractmethod
    def store(self, data: bytes, filename: Optional[str] = None) -> str:
        """Persist bytes and return their key"""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether bytes are present for the key"""

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Return the bytes or raise TemplateFileMissingException"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the bytes; False when nothing was removed"""


class LocalTemplateStore(TemplateStore):
    """Templates kept as files under a storage root"""

    def __init__(self, root: str, prefix: str = "templates"):
        super().__init__(prefix)
        self.root = Path(root).resolve()
        (self.root / self.prefix).mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise TemplateFileMissingException(key)
        return path

    def store(self, data: bytes, filename: Optional[str] = None) -> str:
        key = self.new_key(filename)
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.write(data)
        logger.info("Template stored", key=key, size=len(data))
        return key

    def exists(self, key: str) -> bool:
        try:
            return self._path(key).is_file()
        except TemplateFileMissingException:
            return False

    def read(self, key: str) -> bytes:
        path = self._path(key)
        try:
            with path.open("rb") as f:
                return f.read()
        except FileNotFoundError as e:
            logger.warning("Template file missing", key=key)
            raise TemplateFileMissingException(key) from e

    def delete(self, key: str) -> bool:
        try:
            self._path(key).unlink()
            return True
        except (FileNotFoundError, TemplateFileMissingException):
            return False


class S3TemplateStore(TemplateStore):
    """Templates kept as objects in an S3 bucket"""

    def __init__(self, bucket_name: str, prefix: str = "templates", s3_client=None):
        super().__init__(prefix)
        self.bucket_name = bucket_name
        self.s3_client = s3_client or boto3.client("s3")

    @staticmethod
    def _is_missing(error: ClientError) -> bool:
        return error.response.get('Error', {}).get('Code') in ("404", "NoSuchKey", "NotFound")

    def store(self, data: bytes, filename: Optional[str] = None) -> str:
        key = self.new_key(filename)
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=data,
            ContentType="application/pdf",
        )
        logger.info("Template uploaded to S3", key=key, size=len(data))
        return key

    def exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            if self._is_missing(e):
                return False
            raise

    def read(self, key: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            return response['Body'].read()
        except ClientError as e:
            if self._is_missing(e):
                logger.warning("Template object missing", key=key)
                raise TemplateFileMissingException(key) from e
            logger.error("Error downloading template from S3", key=key, error_message=str(e))
            raise

    def delete(self, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error("Error deleting template from S3", key=key, error_message=str(e))
            return False


def build_template_store(config: Settings) -> TemplateStore:
    """Template store selected by config.storage_backend"""
    if config.storage_backend.lower() == "s3":
        s3_client = boto3.client(
            's3',
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
            region_name=config.aws_region
        )
        return S3TemplateStore(config.s3_bucket_name, prefix=config.template_prefix, s3_client=s3_client)
    return LocalTemplateStore(config.storage_dir, prefix=config.template_prefix)


def get_template_store(config: Settings = Depends(get_settings)) -> TemplateStore:
    """Dependency building the template store for the configured backend"""
    return build_template_store(config)
