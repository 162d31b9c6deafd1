"""S3 service for resume storage"""

import boto3
from botocore.exceptions import ClientError
from datetime import datetime, timezone
from typing import Optional
import os

from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.core.exceptions import NotFoundException, UpstreamException

logger = get_logger(__name__)

MISSING_KEY_CODES = ("NoSuchKey", "404", "NotFound")


class S3Service:
    """Binary object storage for uploaded CVs"""

    def __init__(self, s3_client=None, bucket_name: Optional[str] = None):
        self.s3_client = s3_client or boto3.client(
            's3',
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION
        )
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.cv_prefix = "cvs/"

    def build_key(self, candidate_id: str, filename: str) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        safe_name = os.path.basename(filename).replace(" ", "_")
        return f"{self.cv_prefix}{candidate_id}/{timestamp}_{safe_name}"

    async def upload_cv(
        self,
        content: bytes,
        candidate_id: str,
        filename: str,
        content_type: str = "application/pdf"
    ) -> str:
        """
        Store a CV and return its object key

        Raises:
            UpstreamException: If the upload fails
        """
        s3_key = self.build_key(candidate_id, filename)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=content,
                ContentType=content_type,
                ServerSideEncryption='AES256'
            )
        except ClientError as e:
            logger.error(f"S3 upload failed: {str(e)}")
            raise UpstreamException("s3", f"Failed to upload CV: {str(e)}")

        logger.info(f"Uploaded CV to S3: {s3_key}", extra={"candidate_id": candidate_id})
        return s3_key

    async def download_cv(self, s3_key: str) -> bytes:
        """
        Fetch a stored CV

        Raises:
            NotFoundException: No object under ``s3_key``
            UpstreamException: Any other storage failure
        """
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=s3_key)
            content = response['Body'].read()
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in MISSING_KEY_CODES:
                logger.error(f"CV not found in S3: {s3_key}")
                raise NotFoundException(f"Stored file not found: {s3_key}")
            logger.error(f"S3 download failed: {str(e)}")
            raise UpstreamException("s3", f"Failed to download CV: {str(e)}")

        logger.info(f"Downloaded CV from S3: {s3_key}")
        return content

    async def delete_cv(self, s3_key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
        except ClientError as e:
            logger.error(f"S3 deletion failed: {str(e)}")
            raise UpstreamException("s3", f"Failed to delete CV: {str(e)}")

        logger.info(f"Deleted CV from S3: {s3_key}")

    async def generate_presigned_url(self, s3_key: str, expiration: int = 3600) -> str:
        """
        Presigned GET URL for a stored object

        Args:
            s3_key: S3 object key
            expiration: URL lifetime in seconds
        """
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': s3_key},
                ExpiresIn=expiration
            )
        except ClientError as e:
            logger.error(f"Presigned URL generation failed: {str(e)}")
            raise UpstreamException("s3", f"Failed to generate download URL: {str(e)}")
