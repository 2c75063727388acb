"""
Random file name generation for uploaded images.
"""
import secrets
import string

NAME_ALPHABET = string.ascii_letters + string.digits


def generate_random_name(extension: str, length: int) -> str:
    """
    Generate a random alphanumeric file name.

    Args:
        extension: File extension without the dot (e.g. "png")
        length: Number of characters in the base name

    Returns:
        Name of the form "<base>.<extension>"
    """
    if length < 1:
        raise ValueError("length must be positive")
    base = "".join(secrets.choice(NAME_ALPHABET) for _ in range(length))
    return f"{base}.{extension}"
