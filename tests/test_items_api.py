# tests/test_items_api.py
import hashlib
import io
import json

from shop.database import db as file_db


def test_create_item_with_upload_and_enchantments(client, admin_header, enchantments, image_dir,
                                                  make_sample_jpeg_bytes):
    """
    Full flow:
      - admin creates an enchanted item with an uploaded image
      - the image lands in storage under <sha256>.jpg
      - the item can be fetched back with its enchantments in order
      - the stored name shows up in the browse listing
    """
    jpg = make_sample_jpeg_bytes()
    sharpness = enchantments["minecraft:sharpness"]
    unbreaking = enchantments["minecraft:unbreaking"]
    form = {
        "name": "Excalibur",
        "item_type": "item",
        "game_id": "minecraft:diamond_sword",
        "description": "A legendary blade",
        "extra": json.dumps({"lore": ["Pulled from a stone"]}),
        "image_type": "upload",
        "enchantments": json.dumps([{"id": sharpness.id, "level": 5}, {"id": unbreaking.id, "level": 3}]),
    }
    files = {"file": ("sword.jpg", io.BytesIO(jpg), "image/jpeg")}

    resp = client.post("/api/admin/items/", data=form, files=files, headers=admin_header)
    assert resp.status_code == 201, resp.text
    created = resp.json()

    expected_name = f"{hashlib.sha256(jpg).hexdigest()}.jpg"
    assert created["image"] == expected_name
    assert created["image_url"] == f"/images/{expected_name}"
    assert (image_dir / expected_name).read_bytes() == jpg
    assert created["extra"] == {"lore": ["Pulled from a stone"]}
    assert [(e["game_id"], e["level"]) for e in created["enchantments"]] == [
        ("minecraft:sharpness", 5),
        ("minecraft:unbreaking", 3),
    ]

    resp = client.get(f"/api/items/{created['id']}")
    assert resp.status_code == 200, resp.text
    fetched = resp.json()
    assert fetched["name"] == "Excalibur"
    assert fetched["enchantments"] == created["enchantments"]

    resp = client.get("/api/admin/items/images", headers=admin_header)
    assert resp.status_code == 200, resp.text
    assert resp.json() == [expected_name]


def test_uploading_same_bytes_twice_reuses_the_file(client, admin_header, image_dir, make_sample_jpeg_bytes):
    jpg = make_sample_jpeg_bytes(color=(10, 200, 10))
    names = []
    for title in ("Emerald", "Emerald (copy)"):
        resp = client.post(
            "/api/admin/items/",
            data={"name": title, "game_id": "minecraft:emerald", "image_type": "upload"},
            files={"file": (f"{title}.jpg", io.BytesIO(jpg), "image/jpeg")},
            headers=admin_header,
        )
        assert resp.status_code == 201, resp.text
        names.append(resp.json()["image"])

    assert names[0] == names[1]
    assert [p.name for p in image_dir.iterdir()] == [names[0]]


def test_default_and_browse_images(client, admin_header):
    resp = client.post("/api/admin/items/", data={"name": "Dirt", "game_id": "minecraft:dirt"}, headers=admin_header)
    assert resp.status_code == 201, resp.text
    assert resp.json()["image"] is None
    assert resp.json()["image_url"] is None

    resp = client.post(
        "/api/admin/items/",
        data={"name": "Sand", "game_id": "minecraft:sand", "image_type": "browse", "image_name": "sand.png"},
        headers=admin_header,
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["image"] == "sand.png"


def test_missing_enchantment_returns_404_and_stores_nothing(client, admin_header, enchantments, image_dir,
                                                            make_sample_jpeg_bytes):
    form = {
        "name": "Cursed bow",
        "game_id": "minecraft:bow",
        "image_type": "upload",
        "enchantments": json.dumps([
            {"id": enchantments["minecraft:sharpness"].id, "level": 3},
            {"id": "does-not-exist", "level": 1},
        ]),
    }
    files = {"file": ("bow.jpg", io.BytesIO(make_sample_jpeg_bytes()), "image/jpeg")}
    resp = client.post("/api/admin/items/", data=form, files=files, headers=admin_header)

    assert resp.status_code == 404, resp.text
    assert "does-not-exist" in resp.json()["detail"]
    assert file_db.list_records("items") == []
    assert file_db.list_records("enchantment_items") == []
    assert list(image_dir.iterdir()) == []


def test_permgroup_ignores_enchantments(client, admin_header):
    form = {
        "name": "VIP for 30 days",
        "item_type": "permgroup",
        "game_id": "vip",
        "extra": json.dumps({"duration": 30}),
        "enchantments": json.dumps([{"id": "unknown", "level": 1}]),
    }
    resp = client.post("/api/admin/items/", data=form, headers=admin_header)
    assert resp.status_code == 201, resp.text
    assert resp.json()["type"] == "permgroup"
    assert resp.json()["enchantments"] == []

    resp = client.get("/api/items/", params={"type": "permgroup"})
    assert resp.status_code == 200
    assert [i["name"] for i in resp.json()] == ["VIP for 30 days"]


def test_bad_image_requests_map_to_400(client, admin_header):
    resp = client.post(
        "/api/admin/items/",
        data={"name": "Bread", "game_id": "minecraft:bread", "image_type": "upload"},
        headers=admin_header,
    )
    assert resp.status_code == 400, resp.text
    assert "file_or_name" in resp.json()["detail"]

    resp = client.post(
        "/api/admin/items/",
        data={"name": "Bread", "game_id": "minecraft:bread", "image_type": "gallery"},
        headers=admin_header,
    )
    assert resp.status_code == 400, resp.text
    assert "gallery" in resp.json()["detail"]


def test_invalid_form_payload_is_422(client, admin_header):
    resp = client.post(
        "/api/admin/items/",
        data={"name": "Bread", "game_id": "minecraft:bread", "item_type": "vehicle"},
        headers=admin_header,
    )
    assert resp.status_code == 422

    resp = client.post(
        "/api/admin/items/",
        data={"name": "Bread", "game_id": "minecraft:bread", "enchantments": "not json"},
        headers=admin_header,
    )
    assert resp.status_code == 422


def test_delete_item(client, admin_header, enchantments):
    form = {
        "name": "Shield",
        "game_id": "minecraft:shield",
        "enchantments": json.dumps([{"id": enchantments["minecraft:unbreaking"].id, "level": 2}]),
    }
    item_id = client.post("/api/admin/items/", data=form, headers=admin_header).json()["id"]

    resp = client.delete(f"/api/admin/items/{item_id}", headers=admin_header)
    assert resp.status_code == 200, resp.text
    assert client.get(f"/api/items/{item_id}").status_code == 404
    assert file_db.find_records("enchantment_items", "item_id", item_id) == []
    assert client.delete(f"/api/admin/items/{item_id}", headers=admin_header).status_code == 404


def test_admin_routes_need_admin(client, create_user, token_for):
    create_user(username="player", password="playerpass")
    headers = {"Authorization": f"Bearer {token_for('player', 'playerpass')}"}

    data = {"name": "Dirt", "game_id": "minecraft:dirt"}
    assert client.post("/api/admin/items/", data=data, headers=headers).status_code == 403
    assert client.post("/api/admin/items/", data=data).status_code == 401
    assert client.get("/api/admin/items/images").status_code == 401
