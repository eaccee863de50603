"""Portable Text normalization for editor round-trips.

Every block and inline child leaving ``ensure_keys`` carries a non-empty
``_key`` and the structural fields an editor expects. Existing keys are kept
as they are, so running it again on its own output changes nothing.
"""

from typing import Iterable, List, Optional, Union
import uuid

from property_listings.schemas.rich_text import Block, InlineObject, Span


def new_key(taken: Optional[set] = None) -> str:
    while True:
        key = uuid.uuid4().hex[:16]
        if taken is None or key not in taken:
            if taken is not None:
                taken.add(key)
            return key


def _existing_keys(blocks: List[Block]) -> set:
    keys = set()
    for block in blocks:
        if block.key:
            keys.add(block.key)
        for child in block.children or []:
            if child.key:
                keys.add(child.key)
    return keys


def _normalize_child(child: Union[Span, InlineObject], taken: set) -> Union[Span, InlineObject]:
    if isinstance(child, Span):
        return child.model_copy(update={
            "key": child.key or new_key(taken),
            "text": child.text or "",
            "marks": child.marks or [],
        })
    if isinstance(child, InlineObject):
        return child.model_copy(update={"key": child.key or new_key(taken)})
    raise TypeError(f"Unsupported rich-text child: {type(child).__name__}")


def default_block(text: str = "", taken: Optional[set] = None) -> Block:
    taken = set() if taken is None else taken
    return Block(
        key=new_key(taken),
        type="block",
        style="normal",
        mark_defs=[],
        children=[Span(key=new_key(taken), text=text, marks=[])],
    )


def ensure_keys(blocks: Optional[Iterable[Union[Block, dict]]]) -> List[Block]:
    parsed = [b if isinstance(b, Block) else Block.model_validate(b) for b in (blocks or [])]
    if not parsed:
        return [default_block()]

    taken = _existing_keys(parsed)
    normalized = []
    for block in parsed:
        normalized.append(block.model_copy(update={
            "key": block.key or new_key(taken),
            "type": "block",
            "style": block.style or "normal",
            "mark_defs": block.mark_defs if block.mark_defs is not None else [],
            "children": [_normalize_child(child, taken) for child in block.children or []],
        }))
    return normalized


def text_to_blocks(text: Optional[str]) -> List[Block]:
    """Wrap plain text in a single normal paragraph."""
    return [default_block(text or "")]


def dump_blocks(blocks: List[Block]) -> List[dict]:
    return [block.model_dump(by_alias=True) for block in blocks]
