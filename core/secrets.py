"""
Secure API key management using OS keychain.

Usage:
    from core.secrets import get_api_key, set_api_key

    # Get key (checks keychain first, falls back to env var)
    key = get_api_key("SHOTSTACK_API_KEY")

    # Store key in keychain
    set_api_key("SHOTSTACK_API_KEY", "...")
"""

import os
import logging
from typing import Optional

import keyring
from dotenv import dotenv_values
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

# Service name for keychain entries
SERVICE_NAME = "studio-assembly"

# Known API key names and their environment variable equivalents
KNOWN_KEYS = {
    "OPENAI_API_KEY": "OpenAI API key (TTS)",
    "MINIMAX_API_KEY": "MiniMax API key (TTS)",
    "ELEVENLABS_API_KEY": "ElevenLabs API key (TTS)",
    "GOOGLE_CLOUD_API_KEY": "Google Cloud API key (TTS)",
    "SHOTSTACK_API_KEY": "Shotstack API key (rendering)",
    "SUPABASE_SERVICE_ROLE_KEY": "Supabase service role key (storage)",
}


def get_api_key(key_name: str, fallback_to_env: bool = True) -> Optional[str]:
    """
    Get an API key, checking keychain first then environment variables.

    Args:
        key_name: Name of the API key (e.g., "OPENAI_API_KEY")
        fallback_to_env: If True, check environment variables if not in keychain

    Returns:
        The API key value, or None if not found
    """
    try:
        value = keyring.get_password(SERVICE_NAME, key_name)
        if value:
            logger.debug(f"Retrieved {key_name} from secure keychain")
            return value
    except KeyringError as e:
        logger.debug(f"Keychain access failed for {key_name}: {e}")

    if fallback_to_env:
        value = os.environ.get(key_name)
        if value:
            logger.debug(f"Retrieved {key_name} from environment variable")
            return value

    return None


def set_api_key(key_name: str, value: str) -> bool:
    """Store an API key in the OS keychain. Returns True on success."""
    try:
        keyring.set_password(SERVICE_NAME, key_name, value)
        logger.info(f"Stored {key_name} in secure keychain")
        return True
    except KeyringError as e:
        logger.error(f"Failed to store {key_name} in keychain: {e}")
        return False


def delete_api_key(key_name: str) -> bool:
    """Delete an API key from the OS keychain. Returns True on success."""
    try:
        keyring.delete_password(SERVICE_NAME, key_name)
        logger.info(f"Deleted {key_name} from secure keychain")
        return True
    except PasswordDeleteError:
        logger.warning(f"{key_name} not found in keychain")
        return False
    except KeyringError as e:
        logger.error(f"Failed to delete {key_name} from keychain: {e}")
        return False


def list_api_keys() -> dict:
    """
    List all known API keys and their status.

    Returns:
        Dict mapping key names to "keychain", "env" or "not_set"
    """
    status = {}

    for key_name in KNOWN_KEYS:
        try:
            if keyring.get_password(SERVICE_NAME, key_name):
                status[key_name] = "keychain"
                continue
        except KeyringError:
            pass

        if os.environ.get(key_name):
            status[key_name] = "env"
        else:
            status[key_name] = "not_set"

    return status


def import_from_env_file(env_path: str) -> dict:
    """
    Import known API keys from a .env file into the keychain.

    Returns:
        Dict mapping key names to success status
    """
    if not os.path.exists(env_path):
        raise FileNotFoundError(f"File not found: {env_path}")

    results = {}
    for key, value in dotenv_values(env_path).items():
        if key in KNOWN_KEYS and value:
            results[key] = set_api_key(key, value)
    return results
