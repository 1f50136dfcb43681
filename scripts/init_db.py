"""Creates the data and image folders, the admin account and the enchantment catalogue."""
from pathlib import Path

from shop.config import settings
from shop.core.security import hash_password
from shop.database import db
from shop.models.user import User
from shop.repositories.enchantments import FileEnchantmentRepository
from shop.repositories.users import FileUserRepository

ENCHANTMENTS = [
    "minecraft:protection", "minecraft:fire_protection", "minecraft:feather_falling",
    "minecraft:blast_protection", "minecraft:projectile_protection", "minecraft:respiration",
    "minecraft:aqua_affinity", "minecraft:thorns", "minecraft:depth_strider",
    "minecraft:sharpness", "minecraft:smite", "minecraft:bane_of_arthropods",
    "minecraft:knockback", "minecraft:fire_aspect", "minecraft:looting",
    "minecraft:efficiency", "minecraft:silk_touch", "minecraft:unbreaking",
    "minecraft:fortune", "minecraft:power", "minecraft:punch", "minecraft:flame",
    "minecraft:infinity", "minecraft:luck_of_the_sea", "minecraft:lure", "minecraft:mending",
]


def main() -> None:
    Path(settings.image_dir).mkdir(parents=True, exist_ok=True)
    db.data_dir.mkdir(parents=True, exist_ok=True)

    users = FileUserRepository(db)
    if users.find_by_login(settings.ADMIN_USERNAME) is None:
        admin = users.create(User(
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            is_admin=True,
        ))
        users.add_activation(admin, completed=True)
        print(f"Created admin user {admin.username}")
    else:
        print(f"Admin user {settings.ADMIN_USERNAME} already exists")

    enchantments = FileEnchantmentRepository(db)
    created = 0
    for game_id in ENCHANTMENTS:
        if enchantments.find_by_game_id(game_id) is None:
            enchantments.create(game_id)
            created += 1
    print(f"Seeded {created} enchantment(s)")


if __name__ == "__main__":
    main()
