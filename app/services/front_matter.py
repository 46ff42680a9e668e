import json
import logging
import re
from typing import Any, Dict, NamedTuple

import pydantic
from frontmatter.default_handlers import BaseHandler

from app.exceptions import FrontMatterError
from app.schemas.blog import PostAttributes

logger = logging.getLogger(__name__)

DELIMITER = "---"
_KEY_VALUE_RE = re.compile(r"^(?P<key>[^:]+):(?P<value>.*)$")


class ParsedPost(NamedTuple):
    attributes: PostAttributes
    body: str


class KeyJsonHandler(BaseHandler):
    """
    Front matter written as one ``key: <json value>`` pair per line between
    two ``---`` lines, e.g.::

        ---
        title: "Hello"
        tags: ["python", "web"]
        ---
    """

    FM_BOUNDARY = re.compile(r"^---\r?$", re.MULTILINE)
    START_DELIMITER = DELIMITER
    END_DELIMITER = DELIMITER

    def load(self, fm: str, **kwargs) -> Dict[str, Any]:
        metadata, _lines = self.load_with_lines(fm)
        return metadata

    def load_with_lines(self, fm: str):
        """Decode the block, remembering the file line each key came from."""
        metadata: Dict[str, Any] = {}
        key_lines: Dict[str, int] = {}
        # fm starts right after the opening delimiter, so index 0 is line 1
        for index, raw_line in enumerate(fm.splitlines()):
            line_no = index + 1
            line = raw_line.strip()
            if not line:
                continue
            match = _KEY_VALUE_RE.match(line)
            key = match.group("key").strip() if match else ""
            value = match.group("value").strip() if match else ""
            if not key or not value:
                raise FrontMatterError(
                    f'Failed to parse front matter line "{raw_line}"', line_no
                )
            try:
                metadata[key] = json.loads(value)
            except json.JSONDecodeError as e:
                raise FrontMatterError(
                    f"Invalid JSON value for '{key}': {e.msg}", line_no
                ) from e
            key_lines[key] = line_no
        return metadata, key_lines

    def export(self, metadata: Dict[str, Any], **kwargs) -> str:
        return "\n".join(
            f"{key}: {json.dumps(value)}" for key, value in metadata.items()
        )


_handler = KeyJsonHandler()


def parse_front_matter(raw_text: str) -> ParsedPost:
    """Split a post file into validated attributes and the markdown body."""
    if not _handler.detect(raw_text):
        raise FrontMatterError("File does not start with a front matter delimiter", 1)

    try:
        fm, content = _handler.split(raw_text)
    except ValueError:
        last_line = raw_text.count("\n") + 1
        raise FrontMatterError("Missing closing front matter delimiter", last_line)

    metadata, key_lines = _handler.load_with_lines(fm)
    closing_line = fm.count("\n") + 1

    try:
        attributes = PostAttributes.model_validate(metadata)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        line = key_lines.get(field, closing_line)
        raise FrontMatterError(f"Invalid front matter '{field}': {error['msg']}", line) from e

    # the newline ending the closing delimiter line is not part of the body
    body = content[1:] if content.startswith("\n") else content
    return ParsedPost(attributes=attributes, body=body)


def serialize_front_matter(attributes: PostAttributes, body: str) -> str:
    metadata = attributes.model_dump(exclude_none=True)
    return f"{DELIMITER}\n{_handler.export(metadata)}\n{DELIMITER}\n{body}"
