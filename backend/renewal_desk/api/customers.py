"""Customer/policy write API: single add and CSV bulk import."""
import logging
import os
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy.orm import Session

from renewal_desk.core.config import settings
from renewal_desk.core.database import get_db
from renewal_desk.core.exceptions import MalformedUploadError
from renewal_desk.schemas.customer import CustomerPolicyCreate
from renewal_desk.services.importer import CustomerImportService, temporary_upload
from renewal_desk.services.normalizer import normalize_date, normalize_phone
from renewal_desk.services.store import PolicyStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["customers"])


@router.post("/customers")
def add_customer(data: CustomerPolicyCreate, db: Session = Depends(get_db)):
    """Add one customer with one policy. An existing phone reuses that customer."""
    store = PolicyStore(db)
    customer = store.get_or_create_customer(data.name, normalize_phone(data.phone), data.email)
    store.upsert_policy(
        customer_id=customer.id,
        policy_number=data.policy_number,
        policy_type=data.policy_type,
        expiry_date=normalize_date(data.expiry_date),
    )
    return {"message": "Customer and policy added successfully"}


@router.post("/upload")
def upload_customers(
    file: UploadFile = File(None),
    db: Session = Depends(get_db),
):
    """Import customers and policies from a CSV with a header row."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    with temporary_upload(file.file, file.filename) as file_path:
        if os.path.getsize(file_path) > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(status_code=400, detail="File too large")

        service = CustomerImportService(PolicyStore(db))
        try:
            result = service.import_file(file_path)
        except MalformedUploadError as e:
            logger.error(f"Upload error: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    return {
        "message": "Upload successful",
        "imported": result.imported,
        "skipped": result.skipped,
    }
