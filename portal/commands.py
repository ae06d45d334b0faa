# portal/commands.py
"""
초기 데이터 스크립트

    python commands.py create-admin <password>
    python commands.py seed-products
"""
import asyncio
import click
from motor.motor_asyncio import AsyncIOMotorClient

from core.config import settings
from core.database import Collections, ensure_indexes
from models.product import Product
from models.users import User
from service.auth_service import get_password_hash

SAMPLE_PRODUCTS = [
    {"name": f"제품{i}", "code": f"P{i:03d}", "regist_date": f"2024-06-{i:02d}"}
    for i in range(1, 11)
]


async def _create_admin(password: str, username: str) -> None:
    client = AsyncIOMotorClient(settings.mongodb_uri)
    try:
        db = client[settings.mongodb_db]
        await ensure_indexes(db)

        if await db[Collections.users].find_one({"username": username}):
            click.echo(f"ℹ️ '{username}' 계정이 이미 존재합니다.")
            return

        admin = User(
            username=username,
            password_hash=get_password_hash(password),
            name="관리자",
            company_name="바이오맥스",
            business_number="123-45-67890",
            phone="02-1234-5678",
            address="서울특별시",
            role="admin",
        )
        await db[Collections.users].insert_one(admin.to_document())
        click.echo(f"✅ 관리자 계정 생성됨 (ID: {username})")
    finally:
        client.close()


async def _seed_products() -> None:
    client = AsyncIOMotorClient(settings.mongodb_uri)
    try:
        db = client[settings.mongodb_db]
        await ensure_indexes(db)

        created = 0
        for data in SAMPLE_PRODUCTS:
            if await db[Collections.products].find_one({"code": data["code"]}):
                continue
            await db[Collections.products].insert_one(Product(**data).to_document())
            created += 1
        click.echo(f"✅ 제품 {created}개 추가 (기존 코드는 건너뜀)")
    finally:
        client.close()


@click.group()
def cli():
    pass


@cli.command("create-admin")
@click.argument("password")
@click.option("--username", default="admin", show_default=True)
def create_admin_command(password, username):
    """초기 관리자 계정을 생성합니다."""
    asyncio.run(_create_admin(password, username))


@cli.command("seed-products")
def seed_products_command():
    """샘플 제품(P001~P010)을 추가합니다."""
    asyncio.run(_seed_products())


if __name__ == "__main__":
    cli()
