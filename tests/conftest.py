"""Shared test fixtures and constants for levelz tests."""
import os

LEVELS_DIR = os.path.join(os.path.dirname(__file__), 'levels')
VALID_LEVELS_DIR = os.path.join(LEVELS_DIR, 'valid')
INVALID_LEVELS_DIR = os.path.join(LEVELS_DIR, 'invalid')
SCRIPTS_DIR = os.path.join(os.path.dirname(__file__), '..', 'scripts')


def make_document(*body, type_code=2, spawn='default', extra_headers=()):
    """Build a LevelZ document string from body lines."""
    lines = [f'@type {type_code}', f'@spawn {spawn}', *extra_headers, '---', *body]
    return '\n'.join(lines)
