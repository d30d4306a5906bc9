"""Tests for the CSV import pipeline."""
import io
import os

import pytest

from renewal_desk.core.exceptions import MalformedUploadError
from renewal_desk.models import Customer, Policy
from renewal_desk.services.importer import CustomerImportService, temporary_upload


def _write_csv(tmp_path, text, name="customers.csv"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_imports_rows_with_header_variants(store, db, tmp_path):
    path = _write_csv(tmp_path, (
        "Customer Name,Phone Number,Policy_Number,Policy Type,Expiry Date\n"
        "Asha,9876543210,POL-1,Health,31-01-2025\n"
        "Ravi,919812345678,POL-2,Motor,2025/02/15\n"
    ))

    result = CustomerImportService(store).import_file(path)

    assert result.imported == 2
    assert result.skipped == 0
    asha = db.query(Customer).filter(Customer.phone == "+919876543210").one()
    policy = db.query(Policy).filter(Policy.policy_number == "POL-1").one()
    assert policy.customer_id == asha.id
    assert policy.policy_type == "Health"
    assert policy.expiry_date == "2025-01-31"
    assert policy.status == "active"
    assert db.query(Policy).filter(Policy.policy_number == "POL-2").one().expiry_date == "2025-02-15"


def test_row_missing_phone_is_skipped(store, db, tmp_path):
    path = _write_csv(tmp_path, (
        "name,phone,policy number,expiry\n"
        "Asha,,POL-1,2025-01-31\n"
    ))

    result = CustomerImportService(store).import_file(path)

    assert result.imported == 0
    assert result.skipped == 1
    assert db.query(Customer).count() == 0
    assert db.query(Policy).count() == 0


def test_bad_row_does_not_stop_the_batch(store, db, tmp_path):
    path = _write_csv(tmp_path, (
        "name,phone,policy number,expiry\n"
        "Asha,9876543210,POL-1,2025-01-31\n"
        ",9876500000,POL-2,2025-01-31\n"
        "Ravi,9876500001,POL-3,2025-03-01\n"
    ))

    result = CustomerImportService(store).import_file(path)

    assert (result.imported, result.skipped) == (2, 1)
    assert {p.policy_number for p in db.query(Policy).all()} == {"POL-1", "POL-3"}


def test_same_row_twice_dedups_customer_and_replaces_policy(store, db, tmp_path):
    first = _write_csv(tmp_path, "name,phone,policy number,type,expiry\nAsha,9876543210,POL-1,Health,2025-01-31\n", "a.csv")
    second = _write_csv(tmp_path, "name,phone,policy number,type,expiry\nAsha K,9876543210,POL-1,Life,2025-06-30\n", "b.csv")
    service = CustomerImportService(store)

    service.import_file(first)
    service.import_file(second)

    assert db.query(Customer).count() == 1
    assert db.query(Customer).one().name == "Asha"
    policy = db.query(Policy).one()
    assert policy.policy_type == "Life"
    assert policy.expiry_date == "2025-06-30"


def test_reused_policy_number_moves_policy_to_new_customer(store, db, tmp_path):
    path = _write_csv(tmp_path, (
        "name,phone,policy number,expiry\n"
        "Asha,9876543210,POL-1,2025-01-31\n"
        "Ravi,9876500001,POL-1,2025-02-28\n"
    ))

    CustomerImportService(store).import_file(path)

    ravi = db.query(Customer).filter(Customer.name == "Ravi").one()
    policy = db.query(Policy).one()
    assert policy.customer_id == ravi.id
    assert db.query(Customer).count() == 2


def test_scientific_notation_phone_column(store, db, tmp_path):
    path = _write_csv(tmp_path, "name,mobile,due date\nAsha,9.19877E+11,01-03-2025\n")

    CustomerImportService(store).import_file(path)

    customer = db.query(Customer).one()
    assert customer.phone == "+919877000000"
    assert db.query(Policy).one().expiry_date == "2025-03-01"


def test_small_chunks_stream_every_row(store, db, tmp_path):
    rows = "".join(f"C{i},98765000{i:02d},POL-{i},2025-01-31\n" for i in range(7))
    path = _write_csv(tmp_path, "name,phone,policy number,expiry\n" + rows)

    result = CustomerImportService(store, chunk_size=3).import_file(path)

    assert result.imported == 7
    assert db.query(Policy).count() == 7


def test_header_only_file_imports_nothing(store, tmp_path):
    path = _write_csv(tmp_path, "name,phone,expiry\n")

    result = CustomerImportService(store).import_file(path)

    assert (result.imported, result.skipped) == (0, 0)


def test_empty_file_is_malformed(store, tmp_path):
    path = _write_csv(tmp_path, "")

    with pytest.raises(MalformedUploadError):
        CustomerImportService(store).import_file(path)


def test_temporary_upload_is_removed_after_success(upload_dir):
    with temporary_upload(io.BytesIO(b"name,phone\n"), "list.csv") as path:
        assert os.path.exists(path)
        assert path.endswith(".csv")

    assert not os.path.exists(path)
    assert os.listdir(upload_dir) == []


def test_temporary_upload_is_removed_after_failure(upload_dir):
    with pytest.raises(MalformedUploadError):
        with temporary_upload(io.BytesIO(b""), "list.csv") as path:
            raise MalformedUploadError("boom")

    assert not os.path.exists(path)
