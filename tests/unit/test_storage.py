import asyncio

import pytest

from donlustre.services.storage import (
    BucketNotFoundError, ObjectStore, StorageError, describe_storage_error, receipt_key,
)


@pytest.fixture
def store(tmp_path):
    s = ObjectStore(tmp_path / "storage", "receipts", "/storage")
    s.ensure_bucket()
    return s


def test_upload_then_download(store):
    key = receipt_key("01ORDER")
    asyncio.run(store.upload(key, b"%PDF-1.4 first"))
    assert asyncio.run(store.download(key)) == b"%PDF-1.4 first"
    assert (store.bucket_dir / "orders" / "01ORDER.pdf").is_file()


def test_upsert_overwrites_previous_object(store):
    key = receipt_key("01ORDER")
    asyncio.run(store.upload(key, b"old"))
    asyncio.run(store.upload(key, b"new", upsert=True))
    assert asyncio.run(store.download(key)) == b"new"


def test_upload_without_upsert_refuses_existing_object(store):
    key = receipt_key("01ORDER")
    asyncio.run(store.upload(key, b"old"))
    with pytest.raises(StorageError):
        asyncio.run(store.upload(key, b"new", upsert=False))


def test_missing_bucket_raises_bucket_not_found(tmp_path):
    store = ObjectStore(tmp_path / "storage", "receipts")
    with pytest.raises(BucketNotFoundError) as exc:
        asyncio.run(store.upload("orders/x.pdf", b"data"))
    assert "Bucket not found" in str(exc.value)


def test_key_cannot_escape_bucket(store):
    with pytest.raises(StorageError):
        asyncio.run(store.upload("../outside.pdf", b"data"))


def test_public_url(store):
    assert store.public_url("orders/abc.pdf") == "/storage/receipts/orders/abc.pdf"


def test_describe_bucket_not_found_is_descriptive():
    msg = describe_storage_error(BucketNotFoundError("receipts"), "receipts")
    assert "receipts" in msg
    assert "does not exist" in msg


def test_describe_other_storage_errors():
    msg = describe_storage_error(StorageError("disk full"), "receipts")
    assert msg == "Receipt upload failed: disk full"
