"""Тесты taxledger."""
