from cryptography.fernet import Fernet, InvalidToken


def get_fernet(key: str | bytes) -> Fernet:
    return Fernet(key.encode() if isinstance(key, str) else key)


def encrypt_blob(data: bytes, key: str | bytes) -> bytes:
    """Encrypt a serialized bundle using Fernet symmetric encryption."""
    return get_fernet(key).encrypt(data)


def decrypt_blob(token: bytes, key: str | bytes) -> bytes:
    """Decrypt a Fernet token back to the serialized bundle.

    Raises ``InvalidToken`` when the key is wrong or the blob was tampered with.
    """
    return get_fernet(key).decrypt(token)


__all__ = ["InvalidToken", "decrypt_blob", "encrypt_blob", "get_fernet"]
