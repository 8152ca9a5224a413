import json
import re
from dataclasses import dataclass

# 모델이 지시를 어기고 ```json ... ``` 로 감싸거나 앞뒤에 설명을 붙이는 경우가 많다
FENCED_JSON_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
BARE_JSON_RE = re.compile(r"(\{[\s\S]*\})")

FALLBACK_ENGLISH_CHARS = 500
FALLBACK_URDU = "Report ka tafseel English me dekhen."
ENGLISH_NOT_AVAILABLE = "Summary not available"
URDU_NOT_AVAILABLE = "Roman Urdu summary nahi mil saka"


def _reject_constant(name: str):
    # NaN / Infinity 는 표준 JSON 이 아님
    raise ValueError(f"non-standard JSON constant: {name}")


@dataclass(frozen=True)
class SummaryPair:
    english: str
    roman_urdu: str


def select_json_candidate(raw_text: str) -> str:
    """fence 안의 {...} -> 아무 {...} -> 원문 순서로 파싱 대상을 고른다."""
    match = FENCED_JSON_RE.search(raw_text) or BARE_JSON_RE.search(raw_text)
    return match.group(1) if match else raw_text


def _field(data: object, key: str, default: str) -> str:
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def extract_summary_pair(raw_text: str) -> SummaryPair:
    """
    모델 원문 -> (english, romanUrdu).
    파싱 실패는 예외로 올리지 않고 fallback 텍스트로 대체한다.
    """
    try:
        data = json.loads(select_json_candidate(raw_text), parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        # 너무 깊게 중첩된 출력은 RecursionError
        return SummaryPair(
            english=raw_text[:FALLBACK_ENGLISH_CHARS],
            roman_urdu=FALLBACK_URDU,
        )

    return SummaryPair(
        english=_field(data, "english", ENGLISH_NOT_AVAILABLE),
        roman_urdu=_field(data, "romanUrdu", URDU_NOT_AVAILABLE),
    )
