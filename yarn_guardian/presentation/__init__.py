"""프로세스 진입점 및 조립 레이어."""
