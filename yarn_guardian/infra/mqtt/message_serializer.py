"""Envelope JSON 직렬화/역직렬화.

envelope 키는 camelCase (clientId, module, service, code, msg, content),
content 안의 도메인 객체 키는 PascalCase (RobotId, TimeStamp, ...)로
변환한다. 이 변환은 이 모듈에서만 처리한다.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
import json
from typing import Any

from yarn_guardian.domain.entities.envelope import CODE_SUCCESS, Envelope
from yarn_guardian.domain.exceptions import MessageValidationError

# 백엔드 모델과 이름이 다른 필드
_SPECIAL_SNAKE_TO_PASCAL: dict[str, str] = {
    'timestamp': 'TimeStamp',
}


def _snake_to_pascal(name: str) -> str:
    """snake_case → PascalCase 변환."""
    if name in _SPECIAL_SNAKE_TO_PASCAL:
        return _SPECIAL_SNAKE_TO_PASCAL[name]
    return ''.join(part.capitalize() for part in name.split('_'))


# -- 직렬화 (도메인 → JSON) --

def _serialize_value(value: Any) -> Any:
    """단일 값을 JSON 호환 타입으로 변환한다."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_content(value)
    return value


def dataclass_to_content(obj: Any) -> dict[str, Any]:
    """dataclass를 PascalCase JSON dict로 변환한다."""
    return {
        _snake_to_pascal(f.name): _serialize_value(getattr(obj, f.name))
        for f in fields(obj)
    }


def envelope_to_dict(envelope: Envelope) -> dict[str, Any]:
    """Envelope을 JSON 호환 dict로 변환한다."""
    return {
        'clientId': envelope.client_id,
        'module': envelope.module,
        'service': envelope.service,
        'code': envelope.code,
        'msg': envelope.msg,
        'content': _serialize_value(envelope.content),
    }


def serialize_envelope(envelope: Envelope) -> str:
    """Envelope을 JSON 문자열로 직렬화한다."""
    return json.dumps(envelope_to_dict(envelope), ensure_ascii=False)


# -- 역직렬화 (JSON → 도메인) --

def _lower_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {str(k).lower(): v for k, v in data.items()}


def deserialize_envelope(payload: bytes | str) -> Envelope:
    """JSON 페이로드를 Envelope으로 변환한다.

    envelope 키는 대소문자를 구분하지 않는다 (module / Module).
    content는 service별 스키마 해석 전 원본 그대로 둔다.

    Raises:
        MessageValidationError: JSON이 아니거나 module/service가 없을 때.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MessageValidationError(f"UTF-8 디코딩 실패: {e}") from e

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MessageValidationError(f"잘못된 JSON: {e}") from e

    if not isinstance(data, dict):
        raise MessageValidationError("envelope은 JSON object여야 합니다.")

    keys = _lower_keys(data)
    module = keys.get('module')
    service = keys.get('service')
    if not isinstance(module, str) or not isinstance(service, str):
        raise MessageValidationError(
            f"module/service 누락: {sorted(data)}"
        )

    try:
        client_id = int(keys.get('clientid') or 0)
        code = int(keys.get('code', CODE_SUCCESS))
    except (TypeError, ValueError) as e:
        raise MessageValidationError(f"clientId/code 형식 오류: {e}") from e

    return Envelope(
        module=module,
        service=service,
        content=keys.get('content'),
        client_id=client_id,
        code=code,
        msg=str(keys.get('msg') or ''),
    )
