"""Telegram surface for the trusted contacts screen. Run: python -m bot"""
