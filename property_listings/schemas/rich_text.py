from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from typing import Annotated, Any, List, Literal, Optional, Union


class _PortableText(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    key: Optional[str] = Field(None, alias="_key")


class Span(_PortableText):
    type: Literal["span"] = Field("span", alias="_type")
    text: Optional[str] = None
    marks: Optional[List[str]] = None


class InlineObject(_PortableText):
    type: str = Field(..., alias="_type")


def _child_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("_type", value.get("type"))
    else:
        kind = getattr(value, "type", None)
    return "span" if kind in (None, "span") else "object"


Child = Annotated[
    Union[Annotated[Span, Tag("span")], Annotated[InlineObject, Tag("object")]],
    Discriminator(_child_tag),
]


class Block(_PortableText):
    type: str = Field("block", alias="_type")
    style: Optional[str] = None
    mark_defs: Optional[List[dict]] = Field(None, alias="markDefs")
    children: Optional[List[Child]] = None
