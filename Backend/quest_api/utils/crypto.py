import hashlib
import secrets


def generate_api_key() -> str:
    # 32 random bytes, base64url
    return secrets.token_urlsafe(32)


def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()
