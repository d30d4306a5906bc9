"""CSV import: streams an uploaded customer/policy sheet into the store.

Each row goes through the record normalizer. Rows missing a name, phone or
expiry are skipped and logged, never failing the batch. Accepted rows create
the customer on first sighting of the phone number and upsert the policy by
policy number. Rows are committed one at a time.
"""
import logging
import os
import shutil
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

import pandas as pd
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from renewal_desk.core.config import settings
from renewal_desk.core.exceptions import MalformedUploadError
from renewal_desk.services.normalizer import CanonicalRecord, normalize_record
from renewal_desk.services.store import PolicyStore

logger = logging.getLogger(__name__)


class ImportResult(BaseModel):
    imported: int = 0
    skipped: int = 0


@contextmanager
def temporary_upload(fileobj, filename: Optional[str] = None) -> Iterator[str]:
    """Spool an uploaded file to UPLOAD_DIR and remove it when the block exits, however it exits."""
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    suffix = os.path.splitext(filename or "")[1] or ".csv"
    file_path = os.path.join(settings.UPLOAD_DIR, f"{uuid.uuid4().hex}{suffix}")
    try:
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(fileobj, buffer)
        yield file_path
    finally:
        if os.path.exists(file_path):
            os.remove(file_path)


class CustomerImportService:
    """Imports customer/policy rows from a CSV file with a header row."""

    def __init__(self, store: PolicyStore, chunk_size: Optional[int] = None):
        self.store = store
        self.chunk_size = chunk_size or settings.IMPORT_CHUNK_SIZE

    def read_rows(self, file_path: str) -> Iterator[dict]:
        """Yield each data row as {header: text}. Every cell stays a string so phone columns keep their digits."""
        try:
            reader = pd.read_csv(
                file_path,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=True,
                chunksize=self.chunk_size,
            )
            for chunk in reader:
                for record in chunk.to_dict("records"):
                    yield record
        except pd.errors.EmptyDataError as e:
            raise MalformedUploadError("Uploaded file is empty") from e
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise MalformedUploadError(f"Could not read uploaded file: {e}") from e

    def import_file(self, file_path: str) -> ImportResult:
        result = ImportResult()

        for raw in self.read_rows(file_path):
            record = normalize_record(raw)
            if record is None:
                logger.warning(f"Skipping record due to missing required fields: {raw}")
                result.skipped += 1
                continue

            try:
                self.save_record(record)
            except IntegrityError as e:
                self.store.db.rollback()
                logger.warning(f"Skipping record {record.policy_number}: {e.orig}")
                result.skipped += 1
                continue
            result.imported += 1

        logger.info(f"Import finished: {result.imported} imported, {result.skipped} skipped")
        return result

    def save_record(self, record: CanonicalRecord):
        customer = self.store.get_or_create_customer(record.name, record.phone, record.email)
        return self.store.upsert_policy(
            customer_id=customer.id,
            policy_number=record.policy_number,
            policy_type=record.policy_type,
            expiry_date=record.expiry_date,
        )
