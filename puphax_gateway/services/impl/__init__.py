"""서비스 구현체"""
