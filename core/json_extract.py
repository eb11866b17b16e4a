import json
import re
from typing import Iterator, Optional
from core.entities import Interpretation, Structured, Unparsed

_FENCED_JSON = re.compile(r"```json\n?([\s\S]*?)\n?```")
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")


def _candidates(text: str) -> Iterator[str]:
    """
    Yield JSON candidates in priority order:
    1) body of the first ```json fenced block
    2) greedy span from the first '{' to the last '}'
    """
    fenced = _FENCED_JSON.search(text)
    if fenced:
        yield fenced.group(1)
    span = _BRACE_SPAN.search(text)
    if span:
        yield span.group(0)


def interpret(content: Optional[str]) -> Interpretation:
    """
    Read a JSON object out of a free-text model reply. Never raises.
    """
    raw = content if isinstance(content, str) else ""
    if not raw.strip():
        return Unparsed(reason="empty_content", raw=raw)

    reason = "no_json_found"
    for candidate in _candidates(raw):
        try:
            parsed = json.loads(candidate)
        except ValueError:
            reason = "invalid_json"
            continue
        if isinstance(parsed, dict):
            return Structured(data=parsed)
        reason = "not_an_object"
    return Unparsed(reason=reason, raw=raw)
