# shop/api/routes/items.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError

from shop.api.deps import get_add_item_handler, get_image_storage, get_item_repository, require_admin
from shop.api.schemas.item import ItemCreate, ItemOut
from shop.repositories.items import FileItemRepository
from shop.services.images import ImageStorage, UploadedImage
from shop.services.item_creation import AddItemHandler

IMAGE_URL_PREFIX = "/images"

router = APIRouter(prefix="/api/items", tags=["items"])
admin_router = APIRouter(prefix="/api/admin/items", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/", response_model=List[ItemOut])
def list_items(
    type: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    items: FileItemRepository = Depends(get_item_repository),
):
    """
    List items, optionally filtered by type (item / permgroup).
    """
    results = [i for i in items.all() if type is None or i.type == type]
    return [ItemOut.from_item(i, IMAGE_URL_PREFIX) for i in results[offset: offset + limit]]


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: str, items: FileItemRepository = Depends(get_item_repository)):
    item = items.find(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return ItemOut.from_item(item, IMAGE_URL_PREFIX)


@admin_router.get("/images", response_model=List[str])
def list_stored_images(storage: ImageStorage = Depends(get_image_storage)):
    """
    Filenames already in image storage, for the 'browse' image mode.
    """
    return storage.list_images()


@admin_router.post("/", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(
    name: str = Form(...),
    item_type: str = Form("item"),
    game_id: str = Form(...),
    description: str = Form(""),
    extra: str = Form(""),
    image_type: str = Form("default"),
    image_name: Optional[str] = Form(None),
    enchantments: str = Form("[]"),
    file: Optional[UploadFile] = File(None),
    handler: AddItemHandler = Depends(get_add_item_handler),
):
    """
    Create an item (admin only). Multipart form: `extra` is a JSON object and
    `enchantments` a JSON list of {"id", "level"}; `file` is required when
    image_type is 'upload'.

    Image and enchantment errors are mapped to HTTP responses by the app's
    exception handlers.
    """
    try:
        dto = ItemCreate(
            name=name,
            item_type=item_type,
            game_id=game_id,
            description=description,
            extra=extra,
            image_type=image_type,
            image_name=image_name or None,
            enchantments=enchantments,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        )

    upload = UploadedImage.from_upload_file(file) if file is not None and file.filename else None
    item = handler.handle(dto, upload)
    return ItemOut.from_item(item, IMAGE_URL_PREFIX)


@admin_router.delete("/{item_id}")
def delete_item(item_id: str, items: FileItemRepository = Depends(get_item_repository)):
    """
    Delete an item and its enchantment links. The image file is kept: stored
    images are shared by content and may back other items.
    """
    if not items.delete(item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return {"ok": True}
