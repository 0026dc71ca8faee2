import math
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes to camelCase, accepts camelCase or snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class FormModel(CamelModel):
    """Request body that may arrive as multipart form fields.

    Browsers submit untouched inputs as empty strings; treat those as absent.
    """

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_strings(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and v.strip() == "")}
        return data


# Listing bounds; MAX_PAGE * MAX_LIMIT must fit a 64-bit OFFSET
MAX_LIMIT = 1000
MAX_PAGE = 1_000_000


class MessageResponse(CamelModel):
    message: str


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def split_skills(value):
    if value is None:
        return None
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return value


SkillList = Annotated[list[str] | None, BeforeValidator(split_skills)]
