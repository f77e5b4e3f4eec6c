"""외부 시스템 연동 인프라 레이어."""
