# tests/conftest.py
import io
import os
import sys
import tempfile
from pathlib import Path

import pytest
from PIL import Image

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# point settings at a scratch dir before shop modules are imported, so import-time
# directory creation never touches the working tree
_tmp_root = tempfile.mkdtemp(prefix="shop_test_")
os.environ.setdefault("DATA_DIR", os.path.join(_tmp_root, "data"))
os.environ.setdefault("IMAGE_DIR", os.path.join(_tmp_root, "images"))

from fastapi.testclient import TestClient  # noqa: E402

from shop import database as shop_database  # noqa: E402
from shop.config import settings  # noqa: E402
from shop.core.security import hash_password  # noqa: E402
from shop.main import app  # noqa: E402
from shop.models.user import User  # noqa: E402
from shop.repositories.enchantments import FileEnchantmentRepository  # noqa: E402
from shop.repositories.users import FileUserRepository  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """
    Every test gets its own data dir and image dir.
    """
    data_dir = tmp_path / "data"
    image_dir = tmp_path / "images"
    data_dir.mkdir()
    image_dir.mkdir()
    monkeypatch.setattr(shop_database.db, "data_dir", data_dir)
    monkeypatch.setattr(settings, "image_dir", str(image_dir))
    return {"data_dir": data_dir, "image_dir": image_dir}


@pytest.fixture
def image_dir(isolated_storage):
    return isolated_storage["image_dir"]


@pytest.fixture
def client():
    return TestClient(app)


def create_user_in_db(username="user", password="pass", email=None, is_admin=False, activated=True, balance=0.0):
    """
    Create a user (and a completed activation unless activated=False) in the file-backed DB.
    """
    users = FileUserRepository(shop_database.db)
    user = users.create(User(
        username=username,
        email=email or f"{username}@example.com",
        password_hash=hash_password(password),
        is_admin=is_admin,
        balance=balance,
    ))
    if activated:
        users.add_activation(user, completed=True)
    return user


@pytest.fixture
def create_user():
    return create_user_in_db


@pytest.fixture
def seeded_admin():
    return create_user_in_db(username="admin", password="adminpass", is_admin=True)


@pytest.fixture
def token_for(client):
    """
    Obtain an OAuth token for an existing username/password.
    Usage: token = token_for(username, password)
    """
    def _fn(username: str, password: str):
        resp = client.post("/api/auth/token", data={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["access_token"]
    return _fn


@pytest.fixture
def admin_header(seeded_admin, token_for):
    return {"Authorization": f"Bearer {token_for('admin', 'adminpass')}"}


@pytest.fixture
def enchantments():
    """Seed two enchantments and return them keyed by game id."""
    repo = FileEnchantmentRepository(shop_database.db)
    return {g: repo.create(g) for g in ("minecraft:sharpness", "minecraft:unbreaking")}


@pytest.fixture
def make_sample_jpeg_bytes():
    """
    Return a callable that generates JPEG bytes for tests that need image uploads.
    Usage: jpg = make_sample_jpeg_bytes(size=(200,200))
    """
    def _fn(size=(200, 200), color=(180, 120, 60)):
        bio = io.BytesIO()
        im = Image.new("RGB", size, color)
        im.save(bio, format="JPEG", quality=85)
        bio.seek(0)
        return bio.read()
    return _fn
