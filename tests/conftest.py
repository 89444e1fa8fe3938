# tests/conftest.py
# ============================================================
# Shared pytest fixtures for all tests under tests/:
#   - Introduction / Person / Profile / Contact: small input and output schemas
#   - mock_adapter: scripted backend with request recording
#   - run: drive a coroutine to completion from a sync test
# ============================================================

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Union

import pytest
from pydantic import BaseModel, Field


# ---------- Ensure project root is importable ----------
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ojjson.adapters import MockAdapter  # noqa: E402


# ---------- Schemas ----------
class Introduction(BaseModel):
    introduction: str


class Person(BaseModel):
    name: str
    age: int


class Address(BaseModel):
    city: str
    zip_code: Optional[str] = None


class Profile(BaseModel):
    name: str
    score: float
    active: bool
    tags: List[str]
    address: Address
    extra: dict = {}


class Measurement(BaseModel):
    value: Union[int, str]


class Contact(BaseModel):
    first_name: str = Field(alias="firstName")
    phone: Optional[str] = None


# ---------- Helpers ----------
def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter()
