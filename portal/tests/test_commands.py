"""
초기 데이터 스크립트 테스트 (create-admin, seed-products)
"""
import uuid

import pytest
from click.testing import CliRunner
from mongomock_motor import AsyncMongoMockClient

import commands
from core.config import settings
from service.auth_service import verify_password
from conftest import run


@pytest.fixture
def mongo(monkeypatch):
    """스크립트가 여는 클라이언트를 인메모리 DB로 교체"""
    client = AsyncMongoMockClient()
    db_name = f"cmd_{uuid.uuid4().hex[:8]}"
    monkeypatch.setattr(commands, "AsyncIOMotorClient", lambda uri: client)
    monkeypatch.setattr(settings, "mongodb_db", db_name)
    return client[db_name]


def test_관리자_생성은_한번만(mongo):
    runner = CliRunner()
    first = runner.invoke(commands.cli, ["create-admin", "Admin1234!", "--username", "root"])
    second = runner.invoke(commands.cli, ["create-admin", "Other5678!", "--username", "root"])

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert "이미 존재" in second.output

    admins = run(mongo["users"].find({"username": "root"}).to_list(length=None))
    assert len(admins) == 1
    assert admins[0]["role"] == "admin"
    # 두 번째 실행이 비밀번호를 덮어쓰지 않음
    assert verify_password("Admin1234!", admins[0]["password"])


def test_샘플_제품_중복_없이_추가(mongo):
    runner = CliRunner()
    assert runner.invoke(commands.cli, ["seed-products"]).exit_code == 0
    result = runner.invoke(commands.cli, ["seed-products"])

    assert result.exit_code == 0
    assert "제품 0개 추가" in result.output
    codes = sorted(p["code"] for p in run(mongo["products"].find({}).to_list(length=None)))
    assert codes == [f"P{i:03d}" for i in range(1, 11)]
