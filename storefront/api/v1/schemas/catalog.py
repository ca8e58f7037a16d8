# api/v1/schemas/catalog.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class LoginIn(BaseModel):
    username: str = ""
    password: str = ""


class SessionOut(BaseModel):
    authenticated: bool
    email: Optional[str] = None
    name: Optional[str] = None
    source: Optional[str] = None


class ProductListOut(BaseModel):
    products: List[Dict[str, Any]]
    total: int
    filters: Dict[str, Any] = Field(default_factory=dict)


class ArticleListOut(BaseModel):
    articles: List[Dict[str, Any]]
    total: int


class ImportResult(BaseModel):
    mode: str
    received: int
    imported: int


class MigrationResult(BaseModel):
    migrated: Dict[str, int]
