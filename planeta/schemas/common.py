import re
from typing import Generic, TypeVar, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

T = TypeVar("T")

MISSING_FIELDS_MSG = "Faltan campos requeridos"
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ResponseModel(BaseModel, Generic[T]):
    """Standard API response model"""
    code: int = 200
    data: Optional[T] = None
    msg: str = "success"


class CamelModel(BaseModel):
    """请求/响应字段统一使用 camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def required_text(value):
    # 空字符串与缺失字段同等处理
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("missing", MISSING_FIELDS_MSG)
    return value


def check_length(value: str, low: int, high: Optional[int], message: str) -> str:
    if len(value) < low or (high is not None and len(value) > high):
        raise PydanticCustomError("forum_invalid", message)
    return value


def check_email(value: str) -> str:
    if not EMAIL_RE.match(value):
        raise PydanticCustomError("forum_invalid", "Email inválido")
    return value
