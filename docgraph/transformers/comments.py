"""Conversion of raw doc-comment blocks into ``DocComment`` records."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from ..models import DocComment, DocCommentBlockTag, DocCommentExample

EXAMPLE_TAG = "@example"


def combine_display_parts(parts: Any) -> str:
    """Join the text of a display-part list (``[{kind, text}]``)."""
    if not isinstance(parts, list):
        return ""
    return "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict))


class CommentTransformer:
    """Normalizes comment summaries, block tags and ``@example`` blocks."""

    def to_doc_comment(self, raw: Any) -> Optional[DocComment]:
        if not isinstance(raw, dict):
            return None

        summary = combine_display_parts(raw.get("summary")).strip()
        raw_tags = raw.get("blockTags") if isinstance(raw.get("blockTags"), list) else []
        block_tags = [self.to_block_tag(tag) for tag in raw_tags if isinstance(tag, dict)]
        modifiers = raw.get("modifierTags")
        modifier_tags = [str(tag) for tag in modifiers] if isinstance(modifiers, list) else []

        examples = [
            self._example_from(tag)
            for tag in raw_tags
            if isinstance(tag, dict) and tag.get("tag") == EXAMPLE_TAG
        ]

        return DocComment(
            summary=summary,
            block_tags=block_tags,
            modifier_tags=modifier_tags,
            examples=examples,
        )

    def to_block_tag(self, raw: Any) -> DocCommentBlockTag:
        if not isinstance(raw, dict):
            return DocCommentBlockTag(tag="", text="")
        name = raw.get("name")
        return DocCommentBlockTag(
            tag=str(raw.get("tag", "")),
            name=name if isinstance(name, str) else "",
            text=combine_display_parts(raw.get("content")).strip(),
        )

    def _example_from(self, raw: dict) -> DocCommentExample:
        content = raw.get("content") if isinstance(raw.get("content"), list) else []
        code = next(
            (part for part in _dicts(content) if part.get("kind") == "code"),
            None,
        )
        text_parts = [part for part in _dicts(content) if part.get("kind") != "code"]

        body = str(code.get("text", "")) if code is not None else combine_display_parts(content)
        caption = combine_display_parts(text_parts).strip() if code is not None else ""
        if not caption and isinstance(raw.get("name"), str):
            caption = raw["name"]
        return DocCommentExample(content=body.strip(), caption=caption or None)


def _dicts(values: Iterable[Any]) -> List[dict]:
    return [value for value in values if isinstance(value, dict)]


__all__ = ["CommentTransformer", "EXAMPLE_TAG", "combine_display_parts"]
