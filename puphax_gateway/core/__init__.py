"""Core layer - 설정, 로깅, 실패 어휘, 요청 상관관계."""
