from dataclasses import dataclass
from typing import Any, Dict, Union
from util.enums import AnalysisResult


@dataclass(frozen=True)
class Structured:
    """
    The model reply contained a JSON object.
    """

    data: Dict[str, Any]
    kind: AnalysisResult = AnalysisResult.STRUCTURED


@dataclass(frozen=True)
class Unparsed:
    """
    No JSON object could be read from the model reply; `raw` is the reply text as received.
    """

    reason: str
    raw: str
    kind: AnalysisResult = AnalysisResult.FALLBACK


Interpretation = Union[Structured, Unparsed]


@dataclass(frozen=True)
class ChatPrompt:
    system: str
    user: str

    def messages(self) -> list[dict]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]
