from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from donlustre.dependencies import get_store
from donlustre.services.storage import ObjectStore, StorageError

router = APIRouter(tags=["storage"])


@router.get("/storage/{bucket}/{key:path}")
async def get_public_object(
    bucket: str,
    key: str,
    store: ObjectStore = Depends(get_store),
):
    """Public read access to stored receipts."""
    if bucket != store.bucket:
        raise HTTPException(404, "Bucket not found")
    try:
        data = await store.download(key)
    except (FileNotFoundError, StorageError):
        raise HTTPException(404, "Object not found")
    media_type = "application/pdf" if key.endswith(".pdf") else "application/octet-stream"
    return Response(content=data, media_type=media_type)
